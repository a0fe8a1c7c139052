from julisha.services.hashing import Hasher, hash_value
from julisha.services.votes import VoteStore
from julisha.services.verification import VerificationCodeService
from julisha.services.rate_limit import RateLimiter
from julisha.services.submission import SubmissionService, parse_submission

__all__ = [
    "Hasher",
    "hash_value",
    "VoteStore",
    "VerificationCodeService",
    "RateLimiter",
    "SubmissionService",
    "parse_submission",
]
