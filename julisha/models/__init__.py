from julisha.models.signature import Signature, VerificationType
from julisha.models.verification_code import VerificationCode
from julisha.models.rate_limit import RateLimitWindow

__all__ = [
    "Signature",
    "VerificationType",
    "VerificationCode",
    "RateLimitWindow",
]
