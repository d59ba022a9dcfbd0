import msgspec


class MulticastInterface(msgspec.Struct, frozen=True):
    name: str
    address: str
