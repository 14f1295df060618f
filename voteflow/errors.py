from voteflow.wallet import USER_REJECTED


def is_user_rejection(exc: BaseException) -> bool:
    return getattr(exc, "code", None) == USER_REJECTED


# Heuristic: the contract exposes no structured revert code for a double vote,
# so the only signal is its revert string. Keep every use behind this function.
ALREADY_VOTED_MARKER = "already voted"


def is_already_voted_error(exc: BaseException) -> bool:
    return ALREADY_VOTED_MARKER in str(exc).lower()
