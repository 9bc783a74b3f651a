"""Organization repository listing."""

from typing import List, Optional

from loguru import logger

from ..models.repository import Repository
from .client import GitHubClient
from .endpoints import RepoSort, RepoType

MAX_PER_PAGE = 100


class RepositoryLister:
    """Enumerates every repository of an organization once."""

    def __init__(self, client: GitHubClient):
        self.client = client
        self.logger = logger.bind(component='RepositoryLister')

    async def list(
        self,
        organization: str,
        repo_type: Optional[RepoType] = RepoType.PUBLIC,
        sort: Optional[RepoSort] = None,
        ascending: Optional[bool] = None,
        per_page: int = MAX_PER_PAGE,
    ) -> List[Repository]:
        """Get all pages of an organization's repositories.

        Args:
            organization: Organization login
            repo_type: Visibility filter
            sort: Sort key
            ascending: Sort direction
            per_page: Items per page (1-100)

        Returns:
            Repositories in server order, without repeated identities
        """
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValueError(f'per_page must be between 1 and {MAX_PER_PAGE}')

        repositories: List[Repository] = []
        seen = set()
        page = 1

        while True:
            items = await self.client.list_org_repositories(
                organization,
                repo_type=repo_type,
                sort=sort,
                ascending=ascending,
                per_page=per_page,
                page=page,
            )
            self.logger.debug(f'Page {page} of {organization}: {len(items)} repositories')

            for repository in items:
                if repository.full_name in seen:
                    self.logger.debug(f'Skipping repeated repository {repository.full_name}')
                    continue
                seen.add(repository.full_name)
                repositories.append(repository)

            if len(items) < per_page:
                break

            page += 1

        self.logger.info(f'Retrieved {len(repositories)} repositories from {organization}')
        return repositories
