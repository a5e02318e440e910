"""Entry point for running the MCP GitHub Projects server."""

from mcp_github_projects import main

if __name__ == "__main__":
    main()
