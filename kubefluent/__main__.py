"""
CLI entry point, when used as a module: `python -m kubefluent`.
"""
from kubefluent import cli

if __name__ == '__main__':
    cli.main()
