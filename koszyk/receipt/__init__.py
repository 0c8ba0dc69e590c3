"""Receipt OCR parsing: layout profiles, line parser and list building."""
