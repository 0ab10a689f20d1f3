"""
Visa application status workflow.

    draft / resent --submit--> submitted --assign--> under_review
    submitted / under_review --approve------> approved      (terminal)
    submitted / under_review --reject-------> rejected      (terminal)
    submitted / under_review --request_info-> resent        (back to the customer)

Every status write in Applications.services goes through ``next_status``.
"""
from .exceptions import InvalidTransition

DRAFT = "draft"
SUBMITTED = "submitted"
UNDER_REVIEW = "under_review"
APPROVED = "approved"
REJECTED = "rejected"
RESENT = "resent"

SUBMIT = "submit"
ASSIGN = "assign"
APPROVE = "approve"
REJECT = "reject"
REQUEST_INFO = "request_info"

ACTIONS = (SUBMIT, ASSIGN, APPROVE, REJECT, REQUEST_INFO)

# (current status, action) -> new status. Anything not listed is illegal.
TRANSITIONS = {
    (DRAFT, SUBMIT): SUBMITTED,
    (RESENT, SUBMIT): SUBMITTED,

    (SUBMITTED, ASSIGN): UNDER_REVIEW,
    (UNDER_REVIEW, ASSIGN): UNDER_REVIEW,  # re-assignment

    (SUBMITTED, APPROVE): APPROVED,
    (UNDER_REVIEW, APPROVE): APPROVED,

    (SUBMITTED, REJECT): REJECTED,
    (UNDER_REVIEW, REJECT): REJECTED,

    (SUBMITTED, REQUEST_INFO): RESENT,
    (UNDER_REVIEW, REQUEST_INFO): RESENT,
}

# updateStatus speaks in target statuses; map them to actions
STATUS_ACTIONS = {
    APPROVED: APPROVE,
    REJECTED: REJECT,
    RESENT: REQUEST_INFO,
}

TERMINAL_STATUSES = frozenset({APPROVED, REJECTED})

# statuses in which the customer owns the application and may edit it
EDITABLE_STATUSES = frozenset({DRAFT, RESENT})


def next_status(current_status, action):
    """Return the status ``action`` leads to, or raise InvalidTransition."""
    try:
        return TRANSITIONS[(current_status, action)]
    except KeyError:
        raise InvalidTransition(current_status, action) from None


def can(current_status, action):
    return (current_status, action) in TRANSITIONS


def allowed_actions(current_status):
    return [action for action in ACTIONS if can(current_status, action)]


def is_terminal(status):
    return status in TERMINAL_STATUSES
