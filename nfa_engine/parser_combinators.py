"""
Small parser-combinator toolkit.

A parser is any callable taking the input text and returning a pair
``(rest, value)``: the unconsumed remainder and whatever was parsed. On
failure a parser raises ParseError; ``ParseError.remaining`` is the input the
failing parser was handed, so callers can report where parsing stopped.

This module is independent of the engine. It is the kind of front-end a
pattern compiler could be assembled from:

    >>> number_parser()("12a3")
    ('a3', '12')
"""

from __future__ import annotations
from typing import Callable, List, Tuple, TypeVar

from .errors import ParseError

A = TypeVar("A")
B = TypeVar("B")

ParseResult = Tuple[str, A]
Parser = Callable[[str], ParseResult]


def char_parser() -> Parser:
    """Consume exactly one character."""
    def parse(text: str) -> Tuple[str, str]:
        if not text:
            raise ParseError(text)
        return text[1:], text[0]
    return parse


def filter_parser(parser: Parser, predicate: Callable[[A], bool]) -> Parser:
    """Run ``parser`` and keep its value only if ``predicate`` accepts it.

    A rejected value fails with the original input, not the remainder.
    """
    def parse(text: str) -> ParseResult:
        rest, value = parser(text)
        if not predicate(value):
            raise ParseError(text)
        return rest, value
    return parse


def map_parser(parser: Parser, fn: Callable[[A], B]) -> Parser:
    def parse(text: str) -> ParseResult:
        rest, value = parser(text)
        return rest, fn(value)
    return parse


def digit_parser() -> Parser:
    """One ASCII digit, returned as a one-character string."""
    return map_parser(filter_parser(char_parser(), lambda c: "0" <= c <= "9"), str)


def one_or_more(parser: Parser) -> Parser:
    def parse(text: str) -> Tuple[str, List]:
        rest, first = parser(text)
        values = [first]
        while rest:
            try:
                rest, value = parser(rest)
            except ParseError:
                break
            values.append(value)
        return rest, values
    return parse


def zero_or_more(parser: Parser) -> Parser:
    def parse(text: str) -> Tuple[str, List]:
        rest = text
        values: List = []
        while rest:
            try:
                rest, value = parser(rest)
            except ParseError:
                break
            values.append(value)
        return rest, values
    return parse


def number_parser() -> Parser:
    """A run of digits as a string, e.g. '12' out of '12a3'."""
    return map_parser(one_or_more(digit_parser()), "".join)


def int_parser() -> Parser:
    digits = number_parser()

    def parse(text: str) -> Tuple[str, int]:
        rest, s = digits(text)
        try:
            return rest, int(s)
        except ValueError as ex:
            raise ParseError(text, ParseError.INVALID_NUMBER) from ex
    return parse
