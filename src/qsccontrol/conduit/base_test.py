import unittest
from unittest.mock import Mock, PropertyMock

from hamcrest import is_, assert_that, raises, calling

from qsccontrol.conduit.base import Conduit, ConduitDecorator


class ConduitTest(unittest.TestCase):

    def test_abstract_methods(self):
        sut = Conduit()
        assert_that(calling(sut.close), raises(NotImplementedError))
        assert_that(calling(sut.write).with_args(b"abc"), raises(NotImplementedError))
        assert_that(calling(sut.read_until).with_args(b"\x00"), raises(NotImplementedError))
        assert_that(calling(sut.__getattribute__).with_args('open'), raises(NotImplementedError))
        assert_that(calling(sut.__getattribute__).with_args('target'), raises(NotImplementedError))
        assert_that(calling(sut.__getattribute__).with_args('remote_address'), raises(NotImplementedError))


class ConduitDecoratorTest(unittest.TestCase):
    def test_target(self):
        mock = Mock()
        prop = PropertyMock(return_value="123")
        type(mock).target = prop
        sut = ConduitDecorator(mock)
        assert_that(sut.target, is_("123"))
        prop.assert_called_once()

    def test_remote_address(self):
        mock = Mock()
        type(mock).remote_address = PropertyMock(return_value="10.0.0.1")
        assert_that(ConduitDecorator(mock).remote_address, is_("10.0.0.1"))

    def test_open(self):
        mock = Mock()
        prop = PropertyMock(return_value=True)
        type(mock).open = prop
        sut = ConduitDecorator(mock)
        assert_that(sut.open, is_(True))
        prop.assert_called_once()

    def test_close(self):
        mock = Mock()
        sut = ConduitDecorator(mock)
        assert_that(sut.close(), is_(None))
        mock.close.assert_called_once()

    def test_write(self):
        mock = Mock()
        deadline = object()
        ConduitDecorator(mock).write(b"abc", deadline)
        mock.write.assert_called_once_with(b"abc", deadline)

    def test_read_until(self):
        mock = Mock()
        mock.read_until.return_value = b"abc\x00"
        deadline = object()
        assert_that(ConduitDecorator(mock).read_until(b"\x00", deadline), is_(b"abc\x00"))
        mock.read_until.assert_called_once_with(b"\x00", deadline)


if __name__ == '__main__':  # pragma: no cover
    unittest.main()
