"""MCP server exposing payroll calculations as tools."""
