"""
Entity, transfer model and mapper tests
"""

from book_service.models.book import Book, BookDTO, BookPatchDTO
from book_service.services.book_mapper import BookMapper


class TestBookEquality:

    def test_equal_by_id_only(self):
        assert Book(id=1, title="First title") == Book(id=1, title="Other title")
        assert Book(id=1) != Book(id=2)

    def test_unsaved_books_are_never_equal(self):
        first = Book(title="Same title", author="Same")
        second = Book(title="Same title", author="Same")

        assert first != second
        assert first != Book(id=1)
        assert first == first

    def test_hash_survives_id_assignment(self):
        book = Book(title="Title five")
        books = {book}
        book.id = 3

        assert book in books

    def test_repr(self):
        book = Book(id=1, title="Title", description="Desc", author="Auth")

        assert repr(book) == "Book{id=1, title='Title', description='Desc', author='Auth'}"

    def test_dto_equality(self):
        assert BookDTO(id=1, title="AAAAA", author="a") == BookDTO(id=1, title="BBBBB", author="b")
        assert BookDTO(title="AAAAA", author="a") != BookDTO(title="AAAAA", author="a")


class TestBookMapper:

    def test_round_trip_preserves_fields(self):
        mapper = BookMapper()
        book = Book(id=9, title="Round trip", description="There and back", author="Bilbo")

        result = mapper.to_entity(mapper.to_dto(book))

        assert (result.id, result.title, result.description, result.author) == \
            (book.id, book.title, book.description, book.author)

    def test_list_conversion(self):
        mapper = BookMapper()
        books = [Book(id=1, title="Title one", author="a"), Book(id=2, title="Title two", author="b")]

        dtos = mapper.to_dtos(books)

        assert [dto.id for dto in dtos] == [1, 2]
        assert mapper.to_entities(dtos) == books

    def test_partial_update_copies_only_supplied_fields(self):
        existing = Book(id=4, title="AAAAAAAAAA", description="BBBBBBBBBB", author="CCCCCCCCCC")
        patch = BookPatchDTO(id=4, title="XXXXXXXXXX", description="YYYYYYYYYY")

        merged = BookMapper().partial_update(existing, patch)

        assert merged.title == "XXXXXXXXXX"
        assert merged.description == "YYYYYYYYYY"
        assert merged.author == "CCCCCCCCCC"
        assert existing.title == "AAAAAAAAAA"

    def test_partial_update_never_changes_id(self):
        existing = Book(id=4, title="AAAAAAAAAA", author="CCCCCCCCCC")

        merged = BookMapper().partial_update(existing, BookPatchDTO(id=99, author="Someone"))

        assert merged.id == 4
        assert merged.author == "Someone"
