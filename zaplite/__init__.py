"""Structured logging cores, tees, write syncers, in-memory log observers and a gRPC-style logger."""

__version__ = "0.1.0"
__all__ = ["core", "grpclog", "observer", "testlog", "writesyncer"]