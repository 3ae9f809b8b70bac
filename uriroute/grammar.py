"""
Grammar reference for uriroute templates.

Template Grammar
================

<template>   ::= ( <literal> | <expansion> )* [ "*" ]
<literal>    ::= any text outside "{" ... "}"
<expansion>  ::= "{" <spec> ( "," <spec> )* "}"
<spec>       ::= <name>
               | <name> "=" <default>
               | <name> "=" <default> ":" <constraint>
               | <name> ":" <constraint>
<name>       ::= [A-Za-z_][A-Za-z0-9_.-]*
<default>    ::= any text without ":" "," "}"
<constraint> ::= regular expression without "," "}" and without capturing groups

The first "=" or ":" after the name decides the form of a spec. A "*" is a
wildcard only as the very last character of the template; anywhere else it is
literal text.

Template Examples
=================
/article/{id}                     # one variable, one path segment
/article/{id:\\d+}                # constrained variable
/search/{page=1:\\d+}             # default that satisfies its constraint
/archive/{year}-{month}           # several variables in one segment
/geo/{lat,lng}                    # two variables separated by a comma
/static/*                         # wildcard, bound under "*"
"""

EBNF_GRAMMAR = """
template    = ( literal | expansion )* [ "*" ]
expansion   = "{" spec ( "," spec )* "}"
spec        = name [ "=" default ] [ ":" constraint ]
name        = [A-Za-z_][A-Za-z0-9_.-]*
default     = text - ( ":" | "," | "}" )
constraint  = regex - ( "," | "}" )
"""

# Expansion delimiters
EXPANSION_START = "{"
SPEC_SEPARATOR = ","
DEFAULT_SEPARATOR = "="
CONSTRAINT_SEPARATOR = ":"
WILDCARD = "*"

# Reserved binding for the text consumed by a wildcard
REMAINDER_KEY = "*"

# One or more characters, excluding the path separator
DEFAULT_VARIABLE_FRAGMENT = r"[^/]+"

# Anything, including path separators (compiled with re.DOTALL)
WILDCARD_FRAGMENT = r".*"

NAME_PATTERN = r"[A-Za-z_][A-Za-z0-9_.\-]*"
