from .document_gateway import DocumentGatewayProtocol, UserDocument

__all__ = ["DocumentGatewayProtocol", "UserDocument"]
