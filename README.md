# jetorm

Building blocks for repository-style data access over SQL databases:

- `jetorm.specification`: small, composable `WHERE` clauses with numbered
  placeholders (`$1`, `$2`, …) that are renumbered when clauses are combined.
- `jetorm.pagination`: `Pageable`, `Sort`, `Order`, `Direction` and `Page`
  values describing which page of results to fetch and what came back.
- `jetorm.transaction`: `Tx`, a wrapper over a DB-API connection with
  savepoint tracking that works as a context manager.
- `jetorm.validation` and `jetorm.patterns`: field rules for dataclass
  entities, rule combinators and ready-made format checks.
- `jetorm.helpers` and `jetorm.functional`: retries, parallel runs, debounce,
  throttle, memoisation, collection utilities and primary-key access.
- `jetorm.naming`: snake_case, camelCase and PascalCase conversions.

The package has no runtime dependencies.

## Installation

```
pip install jetorm
```

The test suite needs the `test` extra:

```
pip install "jetorm[test]"
pytest
```

## Specifications

Each helper returns a `Specification`; `to_sql()` gives the clause text and a
list of arguments.

```python
from jetorm.specification import all_of, any_of, equal, greater_than, is_in, negate

active_adults = equal("status", "active").and_(greater_than("age", 18))
active_adults.to_sql()
# ("(status = $1) AND (age > $2)", ["active", 18])

either = any_of(equal("status", "active"), equal("status", "pending"))
either.to_sql()
# ("(status = $1) OR (status = $2)", ["active", "pending"])

not_banned = negate(is_in("status", "banned", "suspended"))
not_banned.to_sql()
# ("NOT (status IN ($1, $2))", ["banned", "suspended"])
```

Specifications also combine with `&`, `|` and `~`. `all_of()` and `any_of()`
with no arguments return `None`, as does `negate(None)`. `is_in` with no values
gives `1 = 0` and `not_in` with no values gives `1 = 1`.

Other helpers: `where`, `not_equal`, `greater_than_equal`, `less_than`,
`less_than_equal`, `like`, `not_in`, `is_null`, `is_not_null`, `between`,
`contains`, `starts_with`, `ends_with` and `renumber_placeholders`.

## Pagination

```python
from jetorm.pagination import Direction, Order, page_request, unpaged

pageable = page_request(0, 20, Order("created_at", Direction.DESC))
second = pageable.next()      # page 1
back = second.previous()      # page 0; previous() never goes below 0
start = second.first()        # page 0

everything = unpaged()        # size -1
```

`Page` is a plain dataclass holding `content` and the paging figures
(`total_elements`, `total_pages`, `number`, `first`, `last`, `empty`, …) for
code that fills it in.

## Transactions

`Tx` wraps a DB-API connection. Used in a `with` block it commits on normal
exit and rolls back when the block raises. Savepoints must be created before
they can be rolled back to or released; otherwise `TransactionError` is raised,
as it is for any operation when the connection is `None`.

```python
from jetorm.transaction import Tx

with Tx(connection) as tx:
    tx.savepoint("before_import")
    ...
    tx.rollback_to("before_import")
    tx.release_savepoint("before_import")
```

`IsolationLevel.to_sql()` returns the SQL spelling of a level, for example
`"REPEATABLE READ"`. `TxOptions` holds isolation, read-only, deferrable and
timeout settings.

## Validation

Entities are dataclasses. A `Validator` applies the rules registered for each
public field, plus any rules given in the field's `validate` metadata
(`required`, `email`, `url`; `min:` and `max:` entries are accepted but do not
check anything). Failures are gathered into one `ValidationError`; passing a
non-dataclass raises `InvalidInputError`.

```python
from dataclasses import dataclass, field

from jetorm.validation import ValidationError, Validator, min_length

@dataclass
class User:
    email: str = field(metadata={"validate": "required,email"})
    name: str = ""

validator = Validator()
validator.register_rule("name", min_length(3))

try:
    validator.validate(User(email="nobody", name="Al"))
except ValidationError as err:
    print(err.violations)
    # ['email: invalid email format', 'name: must be at least 3 characters']
```

A rule is a callable that raises `RuleViolation`. Rules in
`jetorm.validation` include `required`, `email`, `url`, `min_length`,
`max_length`, `length`, `value_range`, `pattern`, `alpha`, `alphanumeric`,
`numeric`, `lowercase`, `uppercase`, `has_letter`, `has_digit`,
`has_special_char`, `in_list`, `not_in_list`, `positive`, `negative`,
`non_zero` and `custom`; `all_rules` and `any_rule` combine them.
`validate_entity(entity)` validates by metadata alone.

Format checks in `jetorm.patterns` include `phone_number`, `credit_card`,
`uuid`, `ipv4`, `ipv6`, `mac_address`, `base64`, `json_format`, `time_format`,
`date`, `date_time`, `time_of_day`, `strong_password`, `username`, `domain`,
`slug`, `hex_color`, `isbn`, `zip_code`, `country_code`, `language_code`,
`currency_code`, `percentage`, `latitude`, `longitude`, `age`, `year`, `port`,
`file_extension`, `mime_type`, `semver`, `not_empty_string`, `no_whitespace`,
`ascii_only`, `unicode_text`, `printable` and `graph`. String checks let
non-string values pass, and numeric checks let non-numbers pass.

## Helpers

```python
from jetorm.functional import chunk, group_by, memoize
from jetorm.helpers import coalesce, retry_with_backoff, unique

chunk([1, 2, 3, 4, 5], 2)          # [[1, 2], [3, 4], [5]]
group_by([1, 2, 3, 4], lambda n: "even" if n % 2 == 0 else "odd")
unique([3, 1, 3, 2, 1])            # [3, 1, 2]
coalesce("", "", "fallback")       # "fallback"
```

`retry`, `retry_with_backoff` and `retry_with_condition` raise `RetryError`
when every attempt fails. `extract_id` and `set_id` read and write the
dataclass field whose `jet` metadata contains `primary_key`.

## What the package does not do

jetorm does not connect to a database, run queries or map rows to entities.
Specifications produce SQL text and argument lists for your own driver, and
`Page` is filled in by your code. `Tx` does not begin transactions or apply
`TxOptions`; it works on a connection you have already opened. There is no
command-line tool and no schema migration support.