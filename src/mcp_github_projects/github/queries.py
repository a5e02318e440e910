"""GraphQL documents for the GitHub Projects V2 API."""

PROJECT_FIELDS = """
    id
    number
    title
    shortDescription
    url
    closed
    public
    createdAt
    updatedAt
"""

VIEWER_QUERY = """
query getViewer {
  viewer {
    login
    name
    url
  }
}
"""

USER_PROJECTS_QUERY = f"""
query getUserProjects($login: String!, $first: Int!, $after: String) {{
  owner: user(login: $login) {{
    projectsV2(first: $first, after: $after) {{
      nodes {{ {PROJECT_FIELDS} }}
      pageInfo {{ hasNextPage endCursor }}
    }}
  }}
}}
"""

ORG_PROJECTS_QUERY = f"""
query getOrgProjects($login: String!, $first: Int!, $after: String) {{
  owner: organization(login: $login) {{
    projectsV2(first: $first, after: $after) {{
      nodes {{ {PROJECT_FIELDS} }}
      pageInfo {{ hasNextPage endCursor }}
    }}
  }}
}}
"""

USER_ID_QUERY = """
query getUserId($login: String!) {
  owner: user(login: $login) { id }
}
"""

ORG_ID_QUERY = """
query getOrgId($login: String!) {
  owner: organization(login: $login) { id }
}
"""

CREATE_PROJECT_MUTATION = f"""
mutation createProject($input: CreateProjectV2Input!) {{
  createProjectV2(input: $input) {{
    projectV2 {{ {PROJECT_FIELDS} }}
  }}
}}
"""

UPDATE_PROJECT_MUTATION = f"""
mutation updateProject($input: UpdateProjectV2Input!) {{
  updateProjectV2(input: $input) {{
    projectV2 {{ {PROJECT_FIELDS} }}
  }}
}}
"""

PROJECT_FIELDS_QUERY = """
query getProjectFields($projectId: ID!, $first: Int!) {
  node(id: $projectId) {
    ... on ProjectV2 {
      title
      number
      fields(first: $first) {
        nodes {
          ... on ProjectV2FieldCommon {
            id
            name
            dataType
          }
          ... on ProjectV2SingleSelectField {
            options {
              id
              name
              color
              description
            }
          }
          ... on ProjectV2IterationField {
            configuration {
              duration
              startDay
              iterations {
                id
                title
                startDate
                duration
              }
              completedIterations {
                id
                title
                startDate
                duration
              }
            }
          }
        }
      }
    }
  }
}
"""

CREATE_FIELD_MUTATION = """
mutation createProjectField($input: CreateProjectV2FieldInput!) {
  createProjectV2Field(input: $input) {
    projectV2Field {
      ... on ProjectV2FieldCommon {
        id
        name
        dataType
      }
      ... on ProjectV2SingleSelectField {
        options {
          id
          name
          color
        }
      }
    }
  }
}
"""

DELETE_FIELD_MUTATION = """
mutation deleteProjectField($input: DeleteProjectV2FieldInput!) {
  deleteProjectV2Field(input: $input) {
    projectV2Field {
      ... on ProjectV2FieldCommon {
        id
        name
      }
    }
  }
}
"""

PROJECT_VIEWS_QUERY = """
query getProjectViews($projectId: ID!, $first: Int!) {
  node(id: $projectId) {
    ... on ProjectV2 {
      title
      number
      views(first: $first) {
        nodes {
          id
          name
          number
          layout
          filter
        }
        pageInfo { hasNextPage endCursor }
      }
    }
  }
}
"""

ITEM_FIELDS = """
    id
    type
    fieldValues(first: 20) {
      nodes {
        ... on ProjectV2ItemFieldTextValue {
          text
          field { ... on ProjectV2FieldCommon { name } }
        }
        ... on ProjectV2ItemFieldNumberValue {
          number
          field { ... on ProjectV2FieldCommon { name } }
        }
        ... on ProjectV2ItemFieldDateValue {
          date
          field { ... on ProjectV2FieldCommon { name } }
        }
        ... on ProjectV2ItemFieldSingleSelectValue {
          name
          field { ... on ProjectV2FieldCommon { name } }
        }
        ... on ProjectV2ItemFieldIterationValue {
          title
          field { ... on ProjectV2FieldCommon { name } }
        }
      }
    }
    content {
      __typename
      ... on Issue {
        id
        title
        number
        url
        state
        repository { name owner { login } }
      }
      ... on PullRequest {
        id
        title
        number
        url
        state
        repository { name owner { login } }
      }
      ... on DraftIssue {
        id
        title
        body
      }
    }
"""

PROJECT_ITEMS_QUERY = f"""
query getProjectItems($projectId: ID!, $first: Int!, $after: String) {{
  node(id: $projectId) {{
    ... on ProjectV2 {{
      title
      number
      items(first: $first, after: $after) {{
        pageInfo {{ hasNextPage endCursor }}
        nodes {{ {ITEM_FIELDS} }}
      }}
    }}
  }}
}}
"""

ITEM_QUERY = f"""
query getProjectItem($itemId: ID!) {{
  node(id: $itemId) {{
    ... on ProjectV2Item {{ {ITEM_FIELDS} }}
  }}
}}
"""

ADD_ITEM_MUTATION = """
mutation addProjectItem($input: AddProjectV2ItemByIdInput!) {
  addProjectV2ItemById(input: $input) {
    item { id }
  }
}
"""

ADD_DRAFT_ITEM_MUTATION = """
mutation addDraftItem($input: AddProjectV2DraftIssueInput!) {
  addProjectV2DraftIssue(input: $input) {
    projectItem {
      id
      type
      content {
        ... on DraftIssue {
          id
          title
          body
        }
      }
    }
  }
}
"""

DELETE_ITEM_MUTATION = """
mutation deleteProjectItem($input: DeleteProjectV2ItemInput!) {
  deleteProjectV2Item(input: $input) {
    deletedItemId
  }
}
"""

UPDATE_ITEM_FIELD_MUTATION = """
mutation updateItemField($input: UpdateProjectV2ItemFieldValueInput!) {
  updateProjectV2ItemFieldValue(input: $input) {
    projectV2Item { id }
  }
}
"""

CONVERT_DRAFT_MUTATION = """
mutation convertDraft($input: ConvertProjectV2DraftIssueItemToIssueInput!) {
  convertProjectV2DraftIssueItemToIssue(input: $input) {
    item {
      id
      content {
        ... on Issue {
          id
          number
          title
          url
          repository { name owner { login } }
        }
      }
    }
  }
}
"""

ISSUE_ID_QUERY = """
query getIssueId($owner: String!, $repo: String!, $number: Int!) {
  repository(owner: $owner, name: $repo) {
    issue(number: $number) {
      id
      number
      title
      url
      state
    }
  }
}
"""

PULL_REQUEST_ID_QUERY = """
query getPullRequestId($owner: String!, $repo: String!, $number: Int!) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $number) {
      id
      number
      title
      url
      state
    }
  }
}
"""

REPOSITORY_QUERY = """
query getRepository($id: ID!) {
  node(id: $id) {
    ... on Repository {
      name
      owner { login }
    }
  }
}
"""

ADD_COMMENT_MUTATION = """
mutation addComment($input: AddCommentInput!) {
  addComment(input: $input) {
    commentEdge { node { id url } }
  }
}
"""
