from .binary_serializer import BinarySerializer
