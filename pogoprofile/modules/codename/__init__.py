from pogoprofile.modules.codename.generator import generate_codename
from pogoprofile.modules.codename.service import (
    ClaimStatus,
    CodenameClaimer,
    CodenameClaimResult,
)

__all__ = ["ClaimStatus", "CodenameClaimer", "CodenameClaimResult", "generate_codename"]
