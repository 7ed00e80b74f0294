"""Mapping tables and naming conventions for the default rule set."""

from __future__ import annotations

from crosswalk.model import TypeReference

# Source primitive → target keyword
PRIMITIVE_TYPES = {
    "boolean": "bool",
    "byte": "sbyte",
    "char": "char",
    "short": "short",
    "int": "int",
    "long": "long",
    "float": "float",
    "double": "double",
    "void": "void",
}

# Library types with a fixed target counterpart, keyed by qualified name
WELL_KNOWN_TYPES = {
    "java.lang.String": TypeReference("string"),
    "java.lang.Object": TypeReference("object"),
    "java.lang.Integer": TypeReference("int?"),
    "java.lang.Long": TypeReference("long?"),
    "java.lang.Boolean": TypeReference("bool?"),
    "java.lang.Exception": TypeReference("Exception", "System"),
    "java.lang.RuntimeException": TypeReference("Exception", "System"),
    "java.lang.IllegalArgumentException": TypeReference(
        "ArgumentException", "System"
    ),
    "java.lang.Iterable": TypeReference(
        "IEnumerable", "System.Collections.Generic"
    ),
    "java.util.List": TypeReference("IList", "System.Collections.Generic"),
    "java.util.ArrayList": TypeReference("List", "System.Collections.Generic"),
    "java.util.Map": TypeReference("IDictionary", "System.Collections.Generic"),
    "java.util.HashMap": TypeReference(
        "Dictionary", "System.Collections.Generic"
    ),
    "java.util.Set": TypeReference("ISet", "System.Collections.Generic"),
    "java.util.HashSet": TypeReference("HashSet", "System.Collections.Generic"),
}

# java.lang is implicitly imported
IMPLICIT_PACKAGE = "java.lang"

TYPE_MODIFIERS = {
    "public": "public",
    "protected": "protected",
    "private": "private",
    "abstract": "abstract",
    "static": "static",
    "final": "sealed",
}

FIELD_MODIFIERS = {
    "public": "public",
    "protected": "protected",
    "private": "private",
    "static": "static",
    "final": "readonly",
    "volatile": "volatile",
}

METHOD_MODIFIERS = {
    "public": "public",
    "protected": "protected",
    "private": "private",
    "static": "static",
    "abstract": "abstract",
    # Target methods are non-virtual unless marked otherwise
    "final": None,
}

# Annotation on a type that keeps it out of the target
IGNORE_ANNOTATION = "Ignore"


def pascal_case(name: str) -> str:
    """``getName`` → ``GetName``."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def namespace_for(package: str) -> str:
    """``com.acme.util`` → ``Com.Acme.Util``."""
    if not package:
        return ""
    return ".".join(pascal_case(part) for part in package.split("."))


def split_type_name(type_name: str) -> tuple[str, list[str], int]:
    """Split a source type expression into base, generic arguments and array rank.

    ``Map<String, List<Foo>>[]`` → (``Map``, [``String``, ``List<Foo>``], 1)
    """
    text = type_name.strip()
    rank = 0
    while text.endswith("[]"):
        rank += 1
        text = text[:-2].rstrip()

    if "<" not in text or not text.endswith(">"):
        return text, [], rank

    base, _, inner = text.partition("<")
    inner = inner[:-1]
    arguments = []
    depth = 0
    current = ""
    for char in inner:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            arguments.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        arguments.append(current.strip())
    return base.strip(), arguments, rank
