"""REST fallback for restricted credentials.

Fine-grained tokens cannot reach Projects V2 GraphQL, so repository
milestones stand in for projects and their issues for project items.
"""

import logging
from typing import Any

from .client import ProjectsClient

logger = logging.getLogger("mcp-github-projects.milestones")


def _simplify_milestone(milestone: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": f"milestone-{milestone.get('id') or milestone.get('number')}",
        "number": milestone.get("number"),
        "title": milestone.get("title") or "Untitled",
        "state": milestone.get("state") or "unknown",
        "description": milestone.get("description") or "",
        "url": milestone.get("html_url"),
        "openIssues": milestone.get("open_issues"),
        "closedIssues": milestone.get("closed_issues"),
        "dueOn": milestone.get("due_on"),
    }


def _simplify_issue(issue: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": issue.get("node_id"),
        "number": issue.get("number"),
        "title": issue.get("title") or "Untitled",
        "state": issue.get("state"),
        "body": issue.get("body") or "",
        "url": issue.get("html_url"),
        "isPullRequest": "pull_request" in issue,
    }


class MilestonesMixin(ProjectsClient):
    """Mixin exposing milestones as lightweight projects over REST."""

    def list_projects_rest(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """List every milestone (open and closed) of a repository."""
        milestones = self.rest(
            "GET", f"/repos/{owner}/{repo}/milestones", params={"state": "all"}
        )
        return [_simplify_milestone(m) for m in milestones or []]

    def create_project_rest(
        self,
        owner: str,
        repo: str,
        title: str,
        description: str | None = None,
        due_on: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a milestone.

        Args:
            owner: Repository owner
            repo: Repository name
            title: Milestone title
            description: Milestone description
            due_on: ISO 8601 timestamp

        Returns:
            The simplified milestone
        """
        body: dict[str, Any] = {"title": title, "state": "open"}
        if description:
            body["description"] = description
        if due_on:
            body["due_on"] = due_on
        milestone = self.rest("POST", f"/repos/{owner}/{repo}/milestones", json=body)
        logger.info(f"Created milestone #{milestone.get('number')} in {owner}/{repo}")
        return _simplify_milestone(milestone)

    def list_project_items_rest(
        self, owner: str, repo: str, milestone_number: int
    ) -> list[dict[str, Any]]:
        """List the issues attached to a milestone, open and closed."""
        issues = self.rest(
            "GET",
            f"/repos/{owner}/{repo}/issues",
            params={"milestone": milestone_number, "state": "all"},
        )
        return [_simplify_issue(issue) for issue in issues or []]

    def add_project_item_rest(
        self, owner: str, repo: str, issue_number: int, milestone_number: int
    ) -> dict[str, Any]:
        """Attach an existing issue to a milestone."""
        issue = self.rest(
            "PATCH",
            f"/repos/{owner}/{repo}/issues/{issue_number}",
            json={"milestone": milestone_number},
        )
        logger.info(
            f"Attached issue #{issue_number} to milestone #{milestone_number} in {owner}/{repo}"
        )
        return _simplify_issue(issue)
