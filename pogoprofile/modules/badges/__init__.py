from pogoprofile.modules.badges.service import BadgeSynchronizer, BadgeSyncResult

__all__ = ["BadgeSynchronizer", "BadgeSyncResult"]
