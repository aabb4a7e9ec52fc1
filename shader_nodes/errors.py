"""
Custom exceptions for Shader Nodes.

Graph mutations report failures through these exceptions instead of
status codes. Code generation never raises for a missing input; it
degrades to placeholder variables and warnings instead.

Exception Hierarchy:
    ShaderNodesError (base)
    ├── GraphError
    │   ├── DuplicateNodeIdError
    │   ├── ProtectedNodeError
    │   ├── NodeNotFoundError
    │   ├── InvalidConnectionError
    │   └── ConnectionNotFoundError
    └── CompilationError
        ├── CycleDetectedError
        └── PreviewError
"""


class ShaderNodesError(Exception):
    """Base exception for all Shader Nodes errors."""
    pass


# =============================================================================
# Graph Errors
# =============================================================================

class GraphError(ShaderNodesError):
    """Base exception for invalid graph mutations."""
    
    def __init__(self, message: str, stage=None, node_id: int = None):
        super().__init__(message)
        self.stage = stage
        self.node_id = node_id


class DuplicateNodeIdError(GraphError):
    """Raised when adding a node under an id already used in the stage."""
    pass


class ProtectedNodeError(GraphError):
    """Raised when trying to remove the stage's Output node."""
    pass


class NodeNotFoundError(GraphError):
    """Raised when a node id does not exist in the stage."""
    pass


class InvalidConnectionError(GraphError):
    """
    Raised when a connection is rejected.
    
    Attributes:
        connection: The (from_node, from_port, to_node, to_port) tuple
        reason: Short description of the failed check
    """
    
    def __init__(self, message: str, stage=None, connection: tuple = None, reason: str = None):
        super().__init__(message, stage=stage, node_id=connection[2] if connection else None)
        self.connection = connection
        self.reason = reason


class ConnectionNotFoundError(GraphError):
    """Raised when disconnecting a connection that does not exist."""
    
    def __init__(self, message: str, stage=None, connection: tuple = None):
        super().__init__(message, stage=stage)
        self.connection = connection


# =============================================================================
# Compilation Errors
# =============================================================================

class CompilationError(ShaderNodesError):
    """Base exception for code generation errors."""
    pass


class CycleDetectedError(CompilationError):
    """
    Raised when the generator re-enters a node that is still being
    processed.
    
    Attributes:
        stage: Stage being generated
        node_id: Node that was reached twice on the active path
    """
    
    def __init__(self, message: str, stage=None, node_id: int = None):
        super().__init__(message)
        self.stage = stage
        self.node_id = node_id


class PreviewError(CompilationError):
    """Raised when a preview is requested for an unusable node or port."""
    
    def __init__(self, message: str, node_id: int = None, port: int = None):
        super().__init__(message)
        self.node_id = node_id
        self.port = port
