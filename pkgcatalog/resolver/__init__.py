"""Resolvers give catalogers read access to a scanned filesystem snapshot."""

from .base import Resolver, ResolverError
from .directory import DirectoryResolver

__all__ = ["DirectoryResolver", "Resolver", "ResolverError"]
