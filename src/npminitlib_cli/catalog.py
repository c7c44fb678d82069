"""Boilerplate files written into every new library project.

Each entry of :data:`TEMPLATES` maps a path relative to the project root to a
generator taking the :class:`ProjectSpec`. Generators are pure: they never
touch the filesystem and never read each other's output, so the whole catalog
can be built and inspected without creating anything on disk.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable

DEFAULT_VERSION = "0.0.1"

# Created before any file is written; every template path lives under one of
# these or directly under the project root.
SUBDIRECTORIES = ["src", ".github", ".github/workflows", "lib", "dist", "__tests__"]


@dataclass(frozen=True)
class ProjectSpec:
    name: str
    target_directory: Path
    version: str = DEFAULT_VERSION
    author: str | None = None
    year: int = field(default_factory=lambda: date.today().year)

    @classmethod
    def from_name(cls, name: str, version: str | None = None, author: str | None = None, cwd: Path | None = None) -> "ProjectSpec":
        """Describe project ``name`` resolved against ``cwd`` (default: current directory)."""
        base = cwd if cwd is not None else Path.cwd()
        return cls(
            name=name,
            target_directory=(base / name).resolve(),
            version=version or DEFAULT_VERSION,
            author=author or None,
        )


@dataclass(frozen=True)
class ContentEntry:
    relative_path: str
    content: str


def _dump(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def package_json(spec: ProjectSpec) -> str:
    manifest = {
        "name": spec.name,
        "version": spec.version,
        "description": "",
        "main": "index.js",
        "scripts": {
            "build": "tsc",
            "type-check": "tsc --noEmit",
            "test": "jest",
            "test:adhoc": "ts-node __tests__/adHoc.ts",
            "test:adhoc:watch": "nodemon --watch src/**/*.ts --exec ts-node __tests__/adHoc.ts",
            "lint": "eslint .",
            "lint:fix": "eslint . --fix",
            "prettier:check": "prettier --check .",
            "prettier:fix": "prettier --write .",
            "release": "semantic-release",
            "pre-bump": "npm run prettier:check && npm run lint && npm run type-check && npm run test",
            "pre-commit": "echo 'Commit complete!'",
            "prepare": "husky install",
            "pack": "npm pack && cross-env-shell mv *.tgz dist/ || move *.tgz dist/",
        },
        "keywords": [],
        "author": spec.author,
        "license": "MIT",
        "dependencies": {
            "dotenv": "^16.4.5",
        },
        "devDependencies": {
            "@commitlint/cli": "^19.4.0",
            "@commitlint/config-conventional": "^19.2.2",
            "semantic-release": "^24.0.0",
            "@types/jest": "^29.5.12",
            "@typescript-eslint/eslint-plugin": "^8.1.0",
            "@typescript-eslint/parser": "^8.1.0",
            "cross-env-shell": "^7.0.3",
            "eslint": "^9.9.0",
            "eslint-config-prettier": "^9.1.0",
            "eslint-plugin-prettier": "^5.2.1",
            "husky": "^8.0.0",
            "jest": "^29.7.0",
            "lint-staged": "^15.2.9",
            "prettier": "^3.3.3",
            "ts-jest": "^29.2.4",
            "typescript": "^5.5.4",
        },
        "lint-staged": {
            "*.ts": ["eslint --fix", "prettier --write"],
            "*.js": ["eslint --fix", "prettier --write"],
        },
    }
    if spec.author is None:
        del manifest["author"]
    return _dump(manifest)


GITIGNORE = """
# Node modules
node_modules
node_modules/*

# Build output
lib
lib/*

# Environment files
.env

# IDE config files
.vscode
.vscode/*

# Package lock
package-lock.json

# OS-specific files
.DS_Store
Thumbs.db

# Other files
*.log
*.tmp

# Exclude everything in dist except the packed .tgz files
dist/*
!dist/*.tgz
"""

GITATTRIBUTES = """
* text=auto eol=lf
"""

ESLINT_CONFIG = """
/** @type {import('eslint').FlatConfig} */
module.exports = [
  {
    ignores: [
      'node_modules/**',
      'package.json',
      'package-lock.json',
      'tsconfig.json',
    ],
  },
  {
    languageOptions: {
      globals: {
        browser: 'readonly',
        node: 'readonly',
        es2021: true,
      },
      parser: require('@typescript-eslint/parser'),
      parserOptions: {
        ecmaVersion: 2021,
        sourceType: 'module',
      },
    },
    plugins: {
      '@typescript-eslint': require('@typescript-eslint/eslint-plugin'),
      prettier: require('eslint-plugin-prettier'),
    },
    rules: {
      'prettier/prettier': 'error',
      'no-unused-vars': 'warn',
      'no-console': 'off',
      semi: ['error', 'never'],
      quotes: ['error', 'single'],
    },
  },
  {
    files: ['*.ts', '*.tsx'],
    rules: {
      '@typescript-eslint/explicit-module-boundary-types': 'off',
      '@typescript-eslint/no-explicit-any': 'warn',
    },
  },
  {
    files: ['*.js', '*.jsx'],
    rules: {
      'no-console': 'off',
    },
  },
  {
    files: ['*.json', '.github/*'],
    rules: {
      'prettier/prettier': ['error', { singleQuote: false }],
    },
  },
  {
    files: ['package.json', 'package-lock.json', 'tsconfig.json'],
    rules: {
      'prettier/prettier': 'off',
    },
  },
]
"""

PRETTIER_CONFIG = {
    "printWidth": 80,
    "tabWidth": 2,
    "useTabs": False,
    "semi": False,
    "singleQuote": True,
    "jsxSingleQuote": False,
    "quoteProps": "as-needed",
    "trailingComma": "all",
    "bracketSpacing": True,
    "arrowParens": "always",
}

RELEASE_CONFIG = {
    "branches": ["main"],
    "plugins": [
        "@semantic-release/commit-analyzer",
        "@semantic-release/release-notes-generator",
        "@semantic-release/changelog",
        ["@semantic-release/npm", {"npmPublish": True}],
        [
            "@semantic-release/git",
            {
                "assets": ["package.json", "CHANGELOG.md"],
                "message": "chore(release): ${nextRelease.version} [skip ci]\n\n${nextRelease.notes}",
            },
        ],
        ["@semantic-release/github", {"assets": ["dist/*.tgz"]}],
    ],
    "release": {
        "analyzeCommits": {
            "preset": "conventionalcommits",
            "releaseRules": [{"type": "docs", "release": "patch"}],
        },
    },
}

JEST_CONFIG = """
module.exports = {
  preset: 'ts-jest',
  testEnvironment: 'node',
  testPathIgnorePatterns: [
    '/node_modules/',
    '/lib/'
  ]
}
"""

NPMIGNORE = """
# Exclude source files
src
src/*

# Include compiled code
!lib
!lib/*

# Ignore tests
__tests__
__tests__/*

# Exclude GitHub workflows
.github
.github/*

# Exclude Husky configuration
.husky
.husky/*

# Ignore IDE config files
.vscode
.vscode/*

# Exclude distribution files and directories
dist
dist/*
lib
lib/*

# Exclude environment file and Git ignore files
.env
.gitignore
.gitattributes

# Exclude configuration files and development-related files
CONFIGURATION.md
jest.config.js
.prettierrc
.releaserc
commitlint.config.js
eslint.config.js
package-lock.json

# Include any additional files or directories to be excluded here
"""

COMMITLINT_CONFIG = """
module.exports = {
  extends: ['@commitlint/config-conventional'],
}
"""

TSCONFIG = """
{
    "compilerOptions": {
      /* Visit https://aka.ms/tsconfig to read more about this file */

      /* Language and Environment */
      "target": "es2016",

      /* Modules */
      "module": "commonjs",
      "rootDir": "./src",
      "moduleResolution": "node",

      /* Emit */
      "declaration": true,
      "outDir": "./lib",

      /* Interop Constraints */
      "esModuleInterop": true,
      "forceConsistentCasingInFileNames": true,

      /* Type Checking */
      "strict": true,

      /* Completeness */
      "skipLibCheck": true
    },
    "include": ["src/**/*.ts"],
    "exclude": ["node_modules", "**/__tests__/**"]
}
"""

LICENSE_TEMPLATE = """
MIT License

Copyright (c) {year} {holder}

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

RELEASE_WORKFLOW = """
name: Release

on:
  push:
    branches:
      - main

jobs:
  release:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout code
        uses: actions/checkout@v4

      - name: Setup Node.js
        uses: actions/setup-node@v4
        with:
          node-version: '20.x'

      - name: Print Node.js and npm versions
        run: node -v && npm -v

      - name: Install dependencies
        run: npm install

      - name: Check code formatting
        run: npm run prettier:check

      - name: Lint code
        run: npm run lint

      - name: Run tests
        run: npm test

      - name: Run Semantic Release
        env:
          GITHUB_TOKEN: ${{ secrets.P_GITHUB_TOKEN }}
          NPM_TOKEN: ${{ secrets.NPM_TOKEN }}
        run: npm run release
"""


def readme(spec: ProjectSpec) -> str:
    return f"# {spec.name} Library\n\n## Description\n"


def license_text(spec: ProjectSpec) -> str:
    return LICENSE_TEMPLATE.format(year=spec.year, holder=spec.author or spec.name)


def _static(content: str) -> Callable[[ProjectSpec], str]:
    return lambda spec: content


TEMPLATES: dict[str, Callable[[ProjectSpec], str]] = {
    "package.json": package_json,
    ".gitignore": _static(GITIGNORE),
    ".gitattributes": _static(GITATTRIBUTES),
    "eslint.config.js": _static(ESLINT_CONFIG),
    ".prettierrc": _static(_dump(PRETTIER_CONFIG)),
    ".releaserc": _static(_dump(RELEASE_CONFIG)),
    "jest.config.js": _static(JEST_CONFIG),
    ".npmignore": _static(NPMIGNORE),
    "commitlint.config.js": _static(COMMITLINT_CONFIG),
    "tsconfig.json": _static(TSCONFIG),
    "README.md": readme,
    "CONFIGURATION.md": _static("\n"),
    "LICENSE": license_text,
    ".env": _static("\n"),
    "src/index.ts": _static(""),
    ".github/workflows/release.yml": _static(RELEASE_WORKFLOW),
}


def build_catalog(spec: ProjectSpec) -> list[ContentEntry]:
    """Render every template for ``spec``, in registry order."""
    return [ContentEntry(path, generate(spec)) for path, generate in TEMPLATES.items()]
