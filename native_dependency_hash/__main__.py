"""CLI entry point: python -m native_dependency_hash"""

from native_dependency_hash.cli import main

main(prog_name="rn-native-hash")
