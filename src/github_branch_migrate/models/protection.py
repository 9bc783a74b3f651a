"""Branch protection models.

``BranchProtection`` is what the API returns for a branch; every sub-record
is absent when the corresponding rule is not configured. ``BranchProtectionUpdate``
is the body of the replace (PUT) call, which references users by login and
teams and apps by slug.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .repository import Account


class _Upstream(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')


class Team(_Upstream):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: str


class App(_Upstream):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: str


class StatusChecks(_Upstream):
    strict: Optional[bool] = None
    contexts: List[str] = Field(default_factory=list)


class AdminEnforcement(_Upstream):
    enabled: bool = False


class DismissalRestrictions(_Upstream):
    users: List[Account] = Field(default_factory=list)
    teams: List[Team] = Field(default_factory=list)


class PullRequestReviews(_Upstream):
    dismissal_restrictions: Optional[DismissalRestrictions] = None
    dismiss_stale_reviews: Optional[bool] = None
    require_code_owner_reviews: Optional[bool] = None
    required_approving_review_count: Optional[int] = None


class PushRestrictions(_Upstream):
    users: List[Account] = Field(default_factory=list)
    teams: List[Team] = Field(default_factory=list)
    apps: List[App] = Field(default_factory=list)


class EnabledFlag(_Upstream):
    enabled: bool = False


class BranchProtection(_Upstream):
    """Protection rules currently attached to a branch."""

    required_status_checks: Optional[StatusChecks] = None
    enforce_admins: Optional[AdminEnforcement] = None
    required_pull_request_reviews: Optional[PullRequestReviews] = None
    restrictions: Optional[PushRestrictions] = None
    required_linear_history: Optional[EnabledFlag] = None
    allow_force_pushes: Optional[EnabledFlag] = None
    allow_deletions: Optional[EnabledFlag] = None


class StatusChecksUpdate(BaseModel):
    strict: bool
    contexts: List[str] = Field(default_factory=list)


class DismissalRestrictionsUpdate(BaseModel):
    users: List[str] = Field(default_factory=list)
    teams: List[str] = Field(default_factory=list)


class PullRequestReviewsUpdate(BaseModel):
    dismissal_restrictions: Optional[DismissalRestrictionsUpdate] = None
    dismiss_stale_reviews: bool = False
    require_code_owner_reviews: bool = False
    required_approving_review_count: int = 1


class PushRestrictionsUpdate(BaseModel):
    users: List[str] = Field(default_factory=list)
    teams: List[str] = Field(default_factory=list)
    apps: Optional[List[str]] = None


class BranchProtectionUpdate(BaseModel):
    """Body for ``PUT /repos/{owner}/{repo}/branches/{branch}/protection``.

    The first four fields are required by the API and are sent as ``null``
    when unset.
    """

    required_status_checks: Optional[StatusChecksUpdate] = None
    enforce_admins: Optional[bool] = None
    required_pull_request_reviews: Optional[PullRequestReviewsUpdate] = None
    restrictions: Optional[PushRestrictionsUpdate] = None
    required_linear_history: bool = False
    allow_force_pushes: bool = False
    allow_deletions: bool = False
