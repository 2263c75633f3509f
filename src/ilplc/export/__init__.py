"""ilplc export: IL text generation from compiled programs.

Public API::

    from ilplc.export import to_instruction_list
    il_text = to_instruction_list(program)
"""

from .il import to_instruction_list

__all__ = ["to_instruction_list"]
