"""CodeLogs social code-snippet blogging backend."""
