"""protoc-gen-encode: typed encoders between structurally similar protobuf schemas."""

__version__ = "1.0.0"
