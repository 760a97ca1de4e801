# notevault

A command-line tool and small library for working with a directory (a
"vault") of Markdown notes. It reads each note's YAML frontmatter and inline
links, and lets you:

- inspect a single note or the whole vault,
- list a note's outgoing links and the notes that link back to it,
- filter notes with a small s-expression query language over frontmatter,
- search the notes' text with BM25, blended with a PageRank score from the
  link graph,
- list all notes ordered by PageRank,
- create a new note from a template.

## Installation

```
pip install .
```

For the test suite, install the `test` extra:

```
pip install ".[test]"
```

## Usage

```
notevault [-j|--json] [-d|--vault-dir DIR] [-t|--template-file FILE] [-v|--variables PAIRS] SUBCOMMAND [ARGUMENT]
```

Options:

| Option                      | Meaning                                                     |
|-----------------------------|-------------------------------------------------------------|
| `-j`, `--json`              | Print results as compact JSON instead of tables             |
| `-d`, `--vault-dir DIR`     | The vault directory (default: the current directory)        |
| `-t`, `--template-file FILE`| Template used by `new`                                      |
| `-v`, `--variables PAIRS`   | Template values, `key:value,other:value`                    |
| `-h`, `--help`              | Print usage and exit; `--help subcommands` lists subcommands |

Option values may also be attached: `--vault-dir=DIR`, `-dDIR`.

Subcommands:

| Subcommand       | What it does                                                          |
|------------------|-----------------------------------------------------------------------|
| `inspect [PATH]` | Show a note's path, metadata and links, or every note in the vault    |
| `links PATH`     | Show the inline links in a note                                       |
| `backlinks PATH` | Show the paths of the notes that link to `PATH`                       |
| `query QUERY`    | Print the `title` of each note whose frontmatter matches `QUERY`      |
| `search TEXT`    | Score notes by BM25 and PageRank and show the top 10 with a score > 0 |
| `list` / `ls`    | List all notes ordered by PageRank, highest first                     |
| `new NAME`       | Render the template into `NAME.md` in the vault and print its path    |

`PATH` is relative to the vault directory and must end in `.md`. Errors are
printed to standard error as `error: ...` and the command exits with status 1.

### Examples

```
notevault -d ~/notes inspect ideas.md
notevault -d ~/notes backlinks ideas.md
notevault -d ~/notes search "graph theory"
notevault -d ~/notes --json list
notevault -d ~/notes -t daily.tmpl -v title:Monday,mood:good new monday
notevault -d ~/notes query "(and (contains tags rust) (not (contains status draft)))"
```

### Search scores

Each note's text is taken without its frontmatter, code blocks and images.
The BM25 score (k1 = 1.6, b = 0.75) is combined with the note's PageRank
(damping 0.85) among the matching notes as `0.7 * bm25 + 0.3 * rank`. Query
terms are split on whitespace and matched exactly against the words of a note.

### Query language

Queries are s-expressions over frontmatter keys:

```
(contains tags rust)
(not (contains status draft))
(and (contains tags rust) (or (contains author "Jane Doe") (contains year 2024)))
(xor (contains a x) (contains b y))
```

`contains KEY VALUE` matches when the frontmatter value under `KEY` equals
`VALUE`: integers compare as numbers, booleans as `true`/`false`, and for
lists and mappings it matches when any element (or any key or value) does.
Values are bare words (anything without whitespace or parentheses) or single-
or double-quoted strings with `\\`, `\n`, `\r`, `\t` and quote escapes.

### Frontmatter

A note may start with a `---` block of YAML that must be a mapping. Only
string keys are kept. Dates are kept as text, floats as they were written, and
only `true` and `false` are read as booleans. A note whose frontmatter cannot
be parsed is left out of the vault.

### Templates

A template is a text file with `{{ name }}` placeholders. Values are given
with `-v name:value,other:value`; every pair needs a `:`, and placeholders
without a value render as empty text.

## Library use

```python
from notevault.vault import Vault
from notevault.query import parse_query

vault = Vault("notes")
for doc in vault.query(parse_query("(contains tags rust)")):
    print(doc.get_metadata("title"))

scores = vault.search("graph theory")   # {Document: bm25 score}
```

The modules are:

- `notevault.vault` – `Vault` (`documents()`, `get_document()`, `search()`,
  `find_backlinks()`, `query()`, `to_dict()`) and `VaultError`.
- `notevault.document` – `Document` (`load()`, `stripped()`, `has_link_to()`,
  `get_metadata()`, `to_dict()`), `ParseError`, `KeyIsNotStringError`,
  `value_contains()` and `format_value()`.
- `notevault.mdpath` – `MarkdownPath` (`resolve()`, `unchecked()`) with
  `NotMarkdownError` and `CanonicalisationError`.
- `notevault.link` – `Link` (`points_to()`, `to_markdown_path()`).
- `notevault.query` – `parse_query()`, the `Contains`, `Not`, `And`, `Or`,
  `Xor` queries and `QueryError`.
- `notevault.search` – `Corpus`, the BM25 statistics.
- `notevault.rank` – `rank()`, PageRank over a list of documents.
- `notevault.template` – `Template`.
- `notevault.cli` – `parse_args()`; `notevault.app` – `main()`.

## What it does not do

- Only the top level of the vault directory is read; notes in subdirectories
  are not loaded.
- Only inline Markdown links (`[text](target.md)`) are followed; reference
  links, autolinks and wiki-style `[[links]]` are not.
- There is no index on disk: every command reads and parses the whole vault.
- The built-in `--help` text is brief and names only some subcommands; this
  file is the fuller reference.