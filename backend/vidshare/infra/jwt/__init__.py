from .flask_jwt_token_codec import FlaskJWTTokenCodec

__all__ = ["FlaskJWTTokenCodec"]
