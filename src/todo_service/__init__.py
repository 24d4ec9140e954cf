"""
Todo service package.

Exposes the FastAPI app from `todo_service.main`; the event consumer lives in
`todo_service.consumer` and runs as a separate process.
"""
