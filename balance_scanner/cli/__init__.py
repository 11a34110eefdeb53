"""Command-line entrypoints. Each module exposes main(argv) -> int."""
