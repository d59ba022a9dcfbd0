class CoTError(Exception):
    pass


class CoTParseError(CoTError):
    pass


class CoTSerializeError(CoTError):
    pass
