"""Tests for the GitHub Projects task workflows."""

import pytest

from mcp_github_projects.exceptions import (
    OptionNotFound,
    RemoteRequestFailed,
    UnsupportedFieldType,
)
from mcp_github_projects.github.batch import BatchOutcome, BatchResult
from mcp_github_projects.github.queries import (
    ADD_COMMENT_MUTATION,
    ADD_DRAFT_ITEM_MUTATION,
    ADD_ITEM_MUTATION,
    ISSUE_ID_QUERY,
    ITEM_QUERY,
    PROJECT_FIELDS_QUERY,
    REPOSITORY_QUERY,
    UPDATE_ITEM_FIELD_MUTATION,
)
from tests.fixtures.github_mocks import (
    MOCK_DRAFT_ITEM_NODE,
    MOCK_FIELDS_RESPONSE,
    MOCK_ISSUE_ITEM_NODE,
    MOCK_PROJECT_ID,
    MOCK_REST_ISSUE,
)
from tests.utils.graphql import route_graphql

DRAFT_CREATED = {
    "addProjectV2DraftIssue": {
        "projectItem": {
            "id": "PVTI_draft",
            "type": "DRAFT_ISSUE",
            "content": {"id": "DI_draft", "title": "Write docs", "body": None},
        }
    }
}


def updated(variables):
    return {
        "updateProjectV2ItemFieldValue": {
            "projectV2Item": {"id": variables["input"]["itemId"]}
        }
    }


def added(variables):
    content_id = variables["input"]["contentId"]
    return {"addProjectV2ItemById": {"item": {"id": f"PVTI_{content_id}"}}}


def count_calls(fetcher, query):
    return sum(1 for call in fetcher.graphql.call_args_list if call.args[0] == query)


class TestCreateTask:
    def test_draft_without_repository(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {ADD_DRAFT_ITEM_MUTATION: DRAFT_CREATED}
        )

        result = projects_fetcher.create_task(MOCK_PROJECT_ID, "Write docs")

        assert result["itemId"] == "PVTI_draft"
        assert result["content"]["type"] == "DRAFT"
        assert "customFields" not in result
        projects_fetcher.rest.assert_not_called()

    def test_custom_fields_are_applied_one_by_one(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                ADD_DRAFT_ITEM_MUTATION: DRAFT_CREATED,
                PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE,
                UPDATE_ITEM_FIELD_MUTATION: updated,
            }
        )

        result = projects_fetcher.create_task(
            MOCK_PROJECT_ID,
            "Write docs",
            custom_fields=[
                {"field_id": "PVTSSF_status", "value": "In Progress"},
                {"field_id": "PVTF_points", "value": "abc"},
                {"field_id": "PVTF_due", "value": "2024-05-01"},
            ],
        )

        custom = result["customFields"]
        assert [o["success"] for o in custom["outcomes"]] == [True, False, True]
        assert custom["summary"] == "2 of 3"
        assert "not a number" in custom["outcomes"][1]["error"]
        # one catalogue fetch for the whole invocation
        assert count_calls(projects_fetcher, PROJECT_FIELDS_QUERY) == 1
        assert count_calls(projects_fetcher, UPDATE_ITEM_FIELD_MUTATION) == 2

    def test_real_issue_with_repository(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                REPOSITORY_QUERY: {"node": {"name": "hello", "owner": {"login": "octocat"}}},
                ADD_ITEM_MUTATION: added,
            }
        )
        projects_fetcher.rest.return_value = MOCK_REST_ISSUE

        result = projects_fetcher.create_task(
            MOCK_PROJECT_ID,
            "Fix bug",
            body="Steps to reproduce",
            repository_id="R_hello",
            assignees=["octocat"],
            labels=["bug"],
            milestone=1,
        )

        projects_fetcher.rest.assert_called_once_with(
            "POST",
            "/repos/octocat/hello/issues",
            json={
                "title": "Fix bug",
                "body": "Steps to reproduce",
                "assignees": ["octocat"],
                "labels": ["bug"],
                "milestone": 1,
            },
        )
        assert result["itemId"] == "PVTI_I_kwDOissue5"
        assert result["content"]["type"] == "ISSUE"
        assert result["content"]["repository"] == "octocat/hello"

    def test_as_draft_ignores_repository(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {ADD_DRAFT_ITEM_MUTATION: DRAFT_CREATED}
        )

        result = projects_fetcher.create_task(
            MOCK_PROJECT_ID, "Write docs", repository_id="R_hello", as_draft=True
        )

        assert result["content"]["type"] == "DRAFT"
        projects_fetcher.rest.assert_not_called()


class TestManageTaskStatus:
    def test_status_change(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE, UPDATE_ITEM_FIELD_MUTATION: updated}
        )

        outcome = projects_fetcher.manage_task_status(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTSSF_status", "Done"
        )

        assert isinstance(outcome, BatchOutcome)
        assert outcome.success is True
        assert outcome.value == {
            "statusField": "Status",
            "status": "Done",
            "singleSelectOptionId": "opt_done",
        }
        assert outcome.details == {}

    def test_comment_is_added_to_issue(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE,
                UPDATE_ITEM_FIELD_MUTATION: updated,
                ITEM_QUERY: {"node": MOCK_ISSUE_ITEM_NODE},
                ADD_COMMENT_MUTATION: {
                    "addComment": {"commentEdge": {"node": {"id": "IC_1", "url": "https://x"}}}
                },
            }
        )

        outcome = projects_fetcher.manage_task_status(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTSSF_status", "Done", comment="Shipped"
        )

        assert outcome.details["comment"] == {
            "success": True,
            "value": {"id": "IC_1", "url": "https://x"},
        }
        comment_call = projects_fetcher.graphql.call_args_list[-1]
        assert comment_call.args[1] == {
            "input": {"subjectId": "I_kwDOissue5", "body": "Shipped"}
        }

    def test_failed_comment_keeps_status_change(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE,
                UPDATE_ITEM_FIELD_MUTATION: updated,
                ITEM_QUERY: {"node": MOCK_ISSUE_ITEM_NODE},
                ADD_COMMENT_MUTATION: RemoteRequestFailed("Issue is locked", status=403),
            }
        )

        outcome = projects_fetcher.manage_task_status(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTSSF_status", "Done", comment="Shipped"
        )

        assert outcome.success is True
        assert outcome.details["comment"] == {"success": False, "error": "Issue is locked"}

    def test_comment_on_draft_is_reported(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE,
                UPDATE_ITEM_FIELD_MUTATION: updated,
                ITEM_QUERY: {"node": MOCK_DRAFT_ITEM_NODE},
            }
        )

        outcome = projects_fetcher.manage_task_status(
            MOCK_PROJECT_ID, "PVTI_draft", "PVTSSF_status", "Todo", comment="Hi"
        )

        assert outcome.success is True
        assert "draft items" in outcome.details["comment"]["error"]

    def test_unknown_status_writes_nothing(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE}
        )

        outcome = projects_fetcher.manage_task_status(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTSSF_status", "Blocked"
        )

        assert isinstance(outcome, OptionNotFound)
        assert outcome.available == ["Todo", "In Progress", "Done"]

    def test_status_field_must_be_single_select(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE}
        )

        outcome = projects_fetcher.manage_task_status(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTF_notes", "Done"
        )

        assert isinstance(outcome, UnsupportedFieldType)
        assert "SINGLE_SELECT" in outcome.message


class TestGroupTasks:
    def test_one_failure_among_many(self, projects_fetcher):
        def update(variables):
            if variables["input"]["itemId"] == "PVTI_2":
                return RemoteRequestFailed("Item is archived", status=200)
            return updated(variables)

        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE, UPDATE_ITEM_FIELD_MUTATION: update}
        )

        result = projects_fetcher.group_tasks(
            MOCK_PROJECT_ID, "PVTIF_sprint", ["PVTI_1", "PVTI_2", "PVTI_3"], "Sprint 2"
        )

        assert isinstance(result, BatchResult)
        assert [o.success for o in result.outcomes] == [True, False, True]
        assert result.success_count == 2
        assert result.outcomes[1].error == "Item is archived"
        sent_values = {
            call.args[1]["input"]["value"]["iterationId"]
            for call in projects_fetcher.graphql.call_args_list
            if call.args[0] == UPDATE_ITEM_FIELD_MUTATION
        }
        assert sent_values == {"it_2"}

    def test_value_resolved_before_any_update(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE}
        )

        result = projects_fetcher.group_tasks(
            MOCK_PROJECT_ID, "PVTIF_sprint", ["PVTI_1"], "Sprint 9"
        )

        assert isinstance(result, OptionNotFound)
        assert count_calls(projects_fetcher, UPDATE_ITEM_FIELD_MUTATION) == 0


class TestBulkAddIssues:
    @staticmethod
    def issue_lookup(variables):
        number = variables["number"]
        if number == 2:
            return RemoteRequestFailed("Something went wrong", status=502)
        return {"repository": {"issue": {"id": f"I_{number}", "number": number, "title": f"Issue {number}"}}}

    def test_second_issue_fails(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {ISSUE_ID_QUERY: self.issue_lookup, ADD_ITEM_MUTATION: added}
        )

        result = projects_fetcher.bulk_add_issues(MOCK_PROJECT_ID, "octocat", "hello", [1, 2, 3])

        assert [o.success for o in result.outcomes] == [True, False, True]
        assert result.success_count == 2
        assert [o.key for o in result.outcomes] == [1, 2, 3]
        assert result.outcomes[0].value == {
            "itemId": "PVTI_I_1",
            "contentId": "I_1",
            "title": "Issue 1",
        }

    def test_status_applied_per_added_issue(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                ISSUE_ID_QUERY: self.issue_lookup,
                ADD_ITEM_MUTATION: added,
                PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE,
                UPDATE_ITEM_FIELD_MUTATION: updated,
            }
        )

        result = projects_fetcher.bulk_add_issues(
            MOCK_PROJECT_ID, "octocat", "hello", [1, 2, 3], "PVTSSF_status", "Todo"
        )

        assert result.success_count == 2
        assert result.outcomes[0].details["status"]["success"] is True
        assert result.outcomes[1].details == {}
        assert count_calls(projects_fetcher, PROJECT_FIELDS_QUERY) == 1
        assert count_calls(projects_fetcher, UPDATE_ITEM_FIELD_MUTATION) == 2

    def test_bad_status_still_counts_as_added(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                ISSUE_ID_QUERY: self.issue_lookup,
                ADD_ITEM_MUTATION: added,
                PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE,
            }
        )

        result = projects_fetcher.bulk_add_issues(
            MOCK_PROJECT_ID, "octocat", "hello", [1], "PVTSSF_status", "Blocked"
        )

        assert result.success_count == 1
        assert result.outcomes[0].details["status"]["success"] is False
        assert "Blocked" in result.outcomes[0].details["status"]["error"]

    def test_status_field_needs_value(self, projects_fetcher):
        with pytest.raises(ValueError, match="status_value is required"):
            projects_fetcher.bulk_add_issues(
                MOCK_PROJECT_ID, "octocat", "hello", [1], "PVTSSF_status"
            )
