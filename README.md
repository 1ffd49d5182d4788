# sniffcheck

Opinionated code-quality checks for TypeScript and Next.js projects, run from
the command line against a project directory.

## Installation

```
pip install .
```

There are no third-party runtime dependencies.

## Commands

The `sniff` command runs one check at a time:

```
sniff           # same as "sniff menu"
sniff menu      # print an overview of the tools
sniff large     # find source files at or over a line threshold
sniff imports   # find unused and broken imports
sniff env       # validate environment variables and .env files
sniff memory    # look for memory-leak patterns and heavy Node.js processes
sniff deploy    # run the pre-deployment pipeline
```

Every command except `menu` accepts:

- `--json`: print the report as JSON instead of text
- `-q`, `--quiet`: print less decoration
- `-C DIR`, `--directory DIR`: check `DIR` instead of the current directory

`sniff large` also takes `-t N` / `--threshold N` (default 100).

Each check exits with status 1 when it finds problems, so it can gate a CI job:

```
sniff large && sniff imports
```

## What each check does

- **large**: walks `.ts`, `.tsx`, `.js` and `.jsx` files (up to ten levels
  deep, skipping `node_modules`, `.git` and `.next`), reports those with at
  least the threshold number of lines, classifies each by role (API route,
  page, layout, middleware, hook, client/server component, type definition,
  service, utility, config, test, other), grades it as warning (under 200
  lines), error (200–399) or critical (400 and more), and lists refactoring
  suggestions. Fails if any file is reported.
- **imports**: parses `import ... from '...'` lines, reports imported names
  that are never used elsewhere in the file, and reports imports that do not
  resolve: relative paths with no matching file (with a suggestion of a
  similarly named nearby file), packages missing from `node_modules`, and
  `tsconfig.json` `compilerOptions.paths` aliases whose target does not exist.
  Fails on any unused or broken import.
- **env**: inspects `.env`, `.env.local`, `.env.development`,
  `.env.production`, `.env.staging` and `.env.test` for malformed lines, empty
  values, unquoted values with spaces and values that look like live
  credentials. It then checks the variables a Next.js project usually needs
  (more are added when `package.json` mentions prisma, stripe, supabase,
  vercel or next) against the process environment and the `.env` files,
  checking the format of `DATABASE_URL`, `NODE_ENV` and the URL variables.
  Fails when a variable is missing or a credential-like value is found.
- **memory**: scans sources up to five levels deep for `addEventListener`,
  `setTimeout`/`setInterval`, `.push(`, `while (true)` / `for (;;)` loops
  (downgraded when the loop body contains `break`, `return` or `throw`) and
  nested function closures. It also runs `ps aux` to list node, npm and yarn
  processes and grades their memory use against thresholds scaled to the
  machine's total memory. Fails on any critical pattern or on more than two
  high-memory processes.
- **deploy**: runs the env, large and imports checks in turn. A failing env
  check blocks deployment; large files and import issues only produce
  warnings.

## Using it from Python

Each check is also available as functions that return report objects rather
than printing, for example `sniffcheck.large.scan_large_files`,
`sniffcheck.imports_analyzer.analyze_imports`,
`sniffcheck.env.analyze_environment`, `sniffcheck.memory.analyze_memory` and
`sniffcheck.deploy.run_checks`. Reports have a `to_dict()` method giving the
same data as `--json`.

## What it does not do

- The menu lists `sniff components`, `sniff types`, `sniff context`,
  `sniff bundle`, `sniff perf` and `sniff config ...`; these commands are not
  provided.
- `sniff deploy` does not include a TypeScript quality check or a bundle-size
  check.
- There is no configuration file: the severity bands (100/200/400 lines), the
  excluded directories and the memory-pattern rules are fixed.

## Running the tests

```
pip install ".[test]"
pytest
```