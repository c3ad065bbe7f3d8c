"""
BitCodeFixer — AI fixes for ESLint/TypeScript errors and AI commit messages.
"""

__version__ = "0.1.0"
