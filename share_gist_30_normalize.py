def leading_spaces(line):
    count = 0

    while count < len(line) and line[count] == ' ':
        count += 1

    return count


def dedent_selection(code):
    """Strip the indentation shared by every line of a selection.

    Only triggers when each line starts with a space; otherwise the text is
    returned as is. Returns None when `code` is not a string.
    """
    if not isinstance(code, str):
        return None

    lines = code.split('\n')

    for line in lines:
        if line[:1] != ' ':
            return code

    indent = None

    for line in lines:
        count = leading_spaces(line)

        if indent is None or count < indent:
            indent = count

    return '\n'.join(line[indent:] for line in lines)
