"""EventRegistry: topic hash -> EventDescriptor lookup over a fixed descriptor table."""

from txlens.parser.utils.types import EventDescriptor


class EventRegistry:
    """Exact topic lookup. Descriptors may share an event name but never a topic.

    Raises ValueError at construction if two descriptors hash to the same topic.
    """

    def __init__(self, descriptors: list[EventDescriptor]) -> None:
        self._by_topic: dict[str, EventDescriptor] = {}
        for descriptor in descriptors:
            topic = descriptor.topic
            existing = self._by_topic.get(topic)
            if existing is not None:
                raise ValueError(
                    f"Topic collision: {descriptor.protocol.value} {descriptor.signature} "
                    f"and {existing.protocol.value} {existing.signature}"
                )
            self._by_topic[topic] = descriptor

    def resolve(self, topic: str | None) -> EventDescriptor | None:
        if not topic:
            return None
        return self._by_topic.get(topic.lower())

    @property
    def descriptors(self) -> list[EventDescriptor]:
        return list(self._by_topic.values())

    def __len__(self) -> int:
        return len(self._by_topic)


def build_default_registry() -> EventRegistry:
    """Create an EventRegistry with every protocol decoder's events registered."""
    from txlens.parser.decoder import build_default_decoders

    descriptors: list[EventDescriptor] = []
    for decoder in build_default_decoders().values():
        descriptors.extend(decoder.EVENTS)
    return EventRegistry(descriptors)
