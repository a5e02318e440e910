"""Tests for the GitHub Projects Items mixin."""

import pytest

from mcp_github_projects.exceptions import (
    FieldNotFound,
    OptionNotFound,
    RemoteNotFound,
    ValueFormatInvalid,
)
from mcp_github_projects.github.queries import (
    ADD_DRAFT_ITEM_MUTATION,
    ADD_ITEM_MUTATION,
    CONVERT_DRAFT_MUTATION,
    DELETE_ITEM_MUTATION,
    ISSUE_ID_QUERY,
    ITEM_QUERY,
    PROJECT_FIELDS_QUERY,
    PROJECT_ITEMS_QUERY,
    PULL_REQUEST_ID_QUERY,
    UPDATE_ITEM_FIELD_MUTATION,
)
from tests.fixtures.github_mocks import (
    MOCK_FIELDS_RESPONSE,
    MOCK_ISSUE_ITEM_NODE,
    MOCK_ITEMS_RESPONSE,
    MOCK_PROJECT_ID,
)
from tests.utils.graphql import route_graphql

UPDATED = {"updateProjectV2ItemFieldValue": {"projectV2Item": {"id": "PVTI_issue"}}}


class TestListProjectItems:
    def test_page_with_items(self, projects_fetcher):
        projects_fetcher.graphql.return_value = MOCK_ITEMS_RESPONSE

        page = projects_fetcher.list_project_items(MOCK_PROJECT_ID, first=2)

        projects_fetcher.graphql.assert_called_once_with(
            PROJECT_ITEMS_QUERY,
            {"projectId": MOCK_PROJECT_ID, "first": 2, "after": None},
        )
        assert page["projectTitle"] == "Roadmap"
        assert page["projectNumber"] == 7
        assert page["pageInfo"] == {"hasNextPage": True, "endCursor": "Y3Vyc29yOjI="}
        issue, draft = page["items"]
        assert issue.content_type == "ISSUE"
        assert issue.repository == "octocat/hello"
        assert issue.fields == {"Status": "Todo", "Points": 3.0}
        assert draft.content_type == "DRAFT"
        assert draft.fields == {}

    def test_cursor_is_forwarded(self, projects_fetcher):
        projects_fetcher.graphql.return_value = MOCK_ITEMS_RESPONSE

        projects_fetcher.list_project_items(MOCK_PROJECT_ID, after="Y3Vyc29yOjI=")

        variables = projects_fetcher.graphql.call_args.args[1]
        assert variables["after"] == "Y3Vyc29yOjI="
        assert variables["first"] == 20

    def test_missing_project(self, projects_fetcher):
        projects_fetcher.graphql.return_value = {"node": None}

        with pytest.raises(RemoteNotFound):
            projects_fetcher.list_project_items(MOCK_PROJECT_ID)


class TestAddAndRemoveItems:
    def test_add_project_item_returns_full_item(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                ADD_ITEM_MUTATION: {"addProjectV2ItemById": {"item": {"id": "PVTI_issue"}}},
                ITEM_QUERY: {"node": MOCK_ISSUE_ITEM_NODE},
            }
        )

        item = projects_fetcher.add_project_item(MOCK_PROJECT_ID, "I_kwDOissue5")

        assert item.id == "PVTI_issue"
        assert item.title == "Fix bug"
        first_call = projects_fetcher.graphql.call_args_list[0]
        assert first_call.args[1] == {
            "input": {"projectId": MOCK_PROJECT_ID, "contentId": "I_kwDOissue5"}
        }

    def test_add_item_without_id(self, projects_fetcher):
        projects_fetcher.graphql.return_value = {"addProjectV2ItemById": {"item": None}}

        with pytest.raises(RemoteNotFound):
            projects_fetcher.add_item_by_id(MOCK_PROJECT_ID, "I_missing")

    def test_create_draft_item(self, projects_fetcher):
        projects_fetcher.graphql.return_value = {
            "addProjectV2DraftIssue": {
                "projectItem": {
                    "id": "PVTI_draft",
                    "type": "DRAFT_ISSUE",
                    "content": {"id": "DI_draft", "title": "Idea", "body": "later"},
                }
            }
        }

        draft = projects_fetcher.create_draft_item(MOCK_PROJECT_ID, "Idea", "later")

        assert draft == {
            "id": "PVTI_draft",
            "type": "DRAFT_ISSUE",
            "contentId": "DI_draft",
            "title": "Idea",
            "body": "later",
        }
        projects_fetcher.graphql.assert_called_once_with(
            ADD_DRAFT_ITEM_MUTATION,
            {"input": {"projectId": MOCK_PROJECT_ID, "title": "Idea", "body": "later"}},
        )

    def test_remove_project_item(self, projects_fetcher):
        projects_fetcher.graphql.return_value = {
            "deleteProjectV2Item": {"deletedItemId": "PVTI_issue"}
        }

        assert projects_fetcher.remove_project_item(MOCK_PROJECT_ID, "PVTI_issue") == "PVTI_issue"
        projects_fetcher.graphql.assert_called_once_with(
            DELETE_ITEM_MUTATION,
            {"input": {"projectId": MOCK_PROJECT_ID, "itemId": "PVTI_issue"}},
        )


class TestUpdateProjectItem:
    def test_option_name_is_sent_as_option_id(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE, UPDATE_ITEM_FIELD_MUTATION: UPDATED}
        )

        result = projects_fetcher.update_project_item(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTSSF_status", "Done"
        )

        assert result["fieldName"] == "Status"
        assert result["payload"] == {"singleSelectOptionId": "opt_done"}
        update_call = projects_fetcher.graphql.call_args_list[-1]
        assert update_call.args[1]["input"] == {
            "projectId": MOCK_PROJECT_ID,
            "itemId": "PVTI_issue",
            "fieldId": "PVTSSF_status",
            "value": {"singleSelectOptionId": "opt_done"},
        }

    def test_unknown_option_sends_no_mutation(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE}
        )

        result = projects_fetcher.update_project_item(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTSSF_status", "Blocked"
        )

        assert isinstance(result, OptionNotFound)
        assert projects_fetcher.graphql.call_count == 1

    def test_bad_number_sends_no_mutation(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE}
        )

        result = projects_fetcher.update_project_item(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTF_points", "abc"
        )

        assert isinstance(result, ValueFormatInvalid)
        assert "Points" in result.message

    def test_unknown_field_id(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {PROJECT_FIELDS_QUERY: MOCK_FIELDS_RESPONSE}
        )

        result = projects_fetcher.update_project_item(
            MOCK_PROJECT_ID, "PVTI_issue", "PVTF_missing", "x"
        )

        assert isinstance(result, FieldNotFound)
        assert "PVTSSF_status" in result.available


class TestGetIssueId:
    def test_issue(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                ISSUE_ID_QUERY: {
                    "repository": {"issue": {"id": "I_kwDOissue5", "number": 5, "title": "Fix bug"}}
                }
            }
        )

        issue = projects_fetcher.get_issue_id("octocat", "hello", 5)

        assert issue == {"type": "issue", "id": "I_kwDOissue5", "number": 5, "title": "Fix bug"}

    def test_falls_back_to_pull_request(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                ISSUE_ID_QUERY: RemoteNotFound("Could not resolve to an Issue", status=200),
                PULL_REQUEST_ID_QUERY: {
                    "repository": {"pullRequest": {"id": "PR_kwDO9", "number": 9}}
                },
            }
        )

        issue = projects_fetcher.get_issue_id("octocat", "hello", 9)

        assert issue["type"] == "pullRequest"
        assert issue["id"] == "PR_kwDO9"

    def test_neither(self, projects_fetcher):
        projects_fetcher.graphql.side_effect = route_graphql(
            {
                ISSUE_ID_QUERY: {"repository": {"issue": None}},
                PULL_REQUEST_ID_QUERY: {"repository": {"pullRequest": None}},
            }
        )

        with pytest.raises(RemoteNotFound, match="#404 not found in octocat/hello"):
            projects_fetcher.get_issue_id("octocat", "hello", 404)


def test_convert_draft_to_issue(projects_fetcher):
    projects_fetcher.graphql.return_value = {
        "convertProjectV2DraftIssueItemToIssue": {
            "item": {
                "id": "PVTI_draft",
                "content": {
                    "id": "I_new",
                    "number": 12,
                    "title": "Idea",
                    "url": "https://github.com/octocat/hello/issues/12",
                    "repository": {"name": "hello", "owner": {"login": "octocat"}},
                },
            }
        }
    }

    result = projects_fetcher.convert_draft_to_issue("PVTI_draft", "R_hello")

    assert result["itemId"] == "PVTI_draft"
    assert result["issue"]["number"] == 12
    assert result["issue"]["repository"] == "octocat/hello"
    projects_fetcher.graphql.assert_called_once_with(
        CONVERT_DRAFT_MUTATION,
        {"input": {"itemId": "PVTI_draft", "repositoryId": "R_hello"}},
    )
