'''
Repeated sub-structures.
'''
from .fields import Field
from .properties import resolve_size
from .exceptions import ParseError


class ArrayField(Field):
    '''Un/Pack an array of Chunks (or Fields).

    The element is a prototype instance: each element is a copy of it. The
    number of elements is decided by

     - "n": a number, a Dependency to a counter or a callable receiving the father
     - "length": the size in bytes used by the elements (a number, a Dependency or a callable)

    when neither is indicated the elements are unpacked until the data runs out.

    When unpacking the array is tolerant: if an element cannot be unpacked,
    because the data is truncated or malformed, the elements read so far
    are kept and the data of the failed element is left in the stream.

    This class must behave like a list in python, obviously cannot implement all the methods
    since, for example, slicing what should mean?
    '''

    def __init__(self, prototype, n=None, length=None, **kw):
        if n is not None and length is not None:
            raise ValueError("you can't indicate both 'n' and 'length'")
        self.prototype = prototype
        self._n = n
        self._length = length

        kw.setdefault('default', [])

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def _set_value(self, value):
        '''The elements can be indicated by their values.'''
        elements = []
        for element in value:
            if not isinstance(element, self.prototype.__class__):
                element = self.instance_element(element)
            element.father = self
            elements.append(element)

        super()._set_value(elements)

    def clear(self):
        self.value.clear()

    def _get_size(self):
        size = 0
        for element in self.value:
            size += element.size

        return size

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for field in self.value:
            size += field.relayout(offset=offset + size)

        return size

    def instance_element(self, value=None):
        element = self.prototype.create(father=self)  # pass the father so that we don't lose the hierarchy
        if value is not None:
            element.value = value

        return element

    def append(self, element):
        '''Append an element already built or create one from its value
        (a dictionary for a Chunk).'''
        if not isinstance(element, self.prototype.__class__):
            element = self.instance_element(element)

        element.father = self
        self.value.append(element)

        return element

    def pack(self, stream):
        for element in self.value:
            element.pack(stream)

    def unpack_element(self, stream):
        '''Returns None if the element cannot be unpacked.'''
        element = self.instance_element()

        stream.save()
        try:
            element.unpack(stream)
        except ParseError as e:
            stream.restore()
            self.logger.warning(
                "stopping array '%s' at element %d: %s" % (self.name, len(self.value), e))
            return None

        stream.discard()

        return element

    def _unpack_elements(self, stream, count):
        while count is None or len(self.value) < count:
            if not stream.remaining():
                if count is not None:
                    self.logger.warning(
                        "array '%s' has %d elements instead of %d" % (self.name, len(self.value), count))
                break

            position = stream.tell()
            element = self.unpack_element(stream)

            if element is None:
                break

            self.value.append(element)

            if stream.tell() == position:
                self.logger.warning("element of array '%s' doesn't consume data" % self.name)
                break

    def unpack(self, stream):
        self.value = []

        count = resolve_size(self._n, self)
        length = resolve_size(self._length, self)

        if length is None:
            self._unpack_elements(stream, count)
            return

        with stream.bounded(length):
            self._unpack_elements(stream, None)
