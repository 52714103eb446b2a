from licdash.server.domain.auth_handler import AuthHandler as AuthHandler
from licdash.server.domain.query_handler import QueryHandler as QueryHandler
from licdash.server.domain.revoke_handler import RevokeHandler as RevokeHandler

__all__ = ["AuthHandler", "QueryHandler", "RevokeHandler"]
