def main() -> None:
    """Entry point for the application: run the development API server."""
    from portfolio_cms.api.main import main as api_main

    api_main()
