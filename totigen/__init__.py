"""totigen: generate a Vue 3 + Pinia + Firebase front end from collection schemas.

Key entry points:
    normalize         - raw collection intake -> CollectionSchema tuple
    GenerationOptions - answers shaping the generated tree
    Pipeline          - runs every generator and writes the artifacts
"""

__version__ = "0.1.0"
