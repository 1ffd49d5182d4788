"""Code-quality checks for TypeScript and Next.js projects: large files, imports, environment, memory and deployment readiness."""

__version__ = "0.2.1"