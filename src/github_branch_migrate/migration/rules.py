"""Protection and repository settings written during a branch migration."""

from ..models.protection import (
    BranchProtection,
    BranchProtectionUpdate,
    DismissalRestrictionsUpdate,
    PullRequestReviewsUpdate,
    PushRestrictionsUpdate,
    StatusChecksUpdate,
)
from ..models.repository import RepositoryUpdate


def derive_new_branch_protection(current: BranchProtection) -> BranchProtectionUpdate:
    """Protection for the new branch, derived from the legacy branch rules.

    Status-check contexts and dismissal restrictions are copied. Strict
    status checks and a single required approval are always enabled; stale
    review dismissal, code owner reviews, push restrictions, admin
    enforcement and the linear-history, force-push and deletion toggles are
    always off.

    Args:
        current: Rules read from the legacy branch (may be empty)

    Returns:
        Body for the protection replace call
    """
    checks = current.required_status_checks
    reviews = current.required_pull_request_reviews
    dismissal = reviews.dismissal_restrictions if reviews else None

    return BranchProtectionUpdate(
        required_status_checks=StatusChecksUpdate(
            strict=True,
            contexts=list(checks.contexts) if checks else [],
        ),
        enforce_admins=False,
        required_pull_request_reviews=PullRequestReviewsUpdate(
            dismissal_restrictions=DismissalRestrictionsUpdate(
                users=[user.login for user in dismissal.users] if dismissal else [],
                teams=[team.slug for team in dismissal.teams] if dismissal else [],
            ),
            dismiss_stale_reviews=False,
            require_code_owner_reviews=False,
            required_approving_review_count=1,
        ),
        restrictions=None,
        required_linear_history=False,
        allow_force_pushes=False,
        allow_deletions=False,
    )


def locked_branch_protection() -> BranchProtectionUpdate:
    """Protection that freezes the legacy branch.

    Nobody may push (empty allow-lists), admins included.
    """
    return BranchProtectionUpdate(
        required_status_checks=None,
        enforce_admins=True,
        required_pull_request_reviews=None,
        restrictions=PushRestrictionsUpdate(users=[], teams=[], apps=[]),
        required_linear_history=False,
        allow_force_pushes=False,
        allow_deletions=False,
    )


def promoted_repository_settings(new_branch: str) -> RepositoryUpdate:
    """Default branch switch plus squash-only merge settings."""
    return RepositoryUpdate(
        default_branch=new_branch,
        allow_merge_commit=False,
        allow_rebase_merge=False,
        allow_squash_merge=True,
        delete_branch_on_merge=True,
    )
