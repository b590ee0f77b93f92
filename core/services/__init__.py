# Services Module
from .money import format_price, parse_price, round_money, to_decimal, to_float, to_json_number

__all__ = ["format_price", "parse_price", "round_money", "to_decimal", "to_float", "to_json_number"]
