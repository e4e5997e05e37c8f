"""Results and passes that classify C++ types for Swift interoperability: sendability, inheritance, typedefs, enums and value type names."""

__version__ = "0.1.0"