"""sqlclause AST: clause nodes, statements, and their constructors."""
from sqlclause.schema.elements import (
    AliasClause,
    BindClause,
    Clause,
    ColumnElem,
    ListClause,
    TableElem,
    TextClause,
)
from sqlclause.schema.expressions import (
    AggregateClause,
    BinaryExpressionClause,
    CombinerClause,
    ExistsClause,
    HavingClause,
    JoinClause,
    OrderByClause,
    WhereClause,
)
from sqlclause.schema.statements import (
    DeleteStmt,
    InsertStmt,
    SelectStmt,
    UpdateStmt,
    UpsertStmt,
)

__all__ = [
    "Clause",
    "TextClause",
    "BindClause",
    "ColumnElem",
    "TableElem",
    "ListClause",
    "AliasClause",
    "BinaryExpressionClause",
    "CombinerClause",
    "ExistsClause",
    "AggregateClause",
    "JoinClause",
    "OrderByClause",
    "HavingClause",
    "WhereClause",
    "SelectStmt",
    "InsertStmt",
    "UpdateStmt",
    "DeleteStmt",
    "UpsertStmt",
]
