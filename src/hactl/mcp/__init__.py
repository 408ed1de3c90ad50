"""MCP adapter exposing the operation registry as tools and resources."""
