"""appsync-aurora: AppSync GraphQL API backed by Aurora Serverless."""

__version__ = "0.1.0"
