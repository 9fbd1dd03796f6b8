"""Resolver definitions and their AppSync mapping templates."""

from appsync_aurora.mapping.resolvers import RESOLVERS, MappingTemplates, ResolverSpec, find_resolver

__all__ = ["RESOLVERS", "MappingTemplates", "ResolverSpec", "find_resolver"]
