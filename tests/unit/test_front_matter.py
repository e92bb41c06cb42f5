"""
Unit Tests for Front Matter Schemas

Tests normalization of the loose YAML shapes authors write.
"""

import pytest
from datetime import date, datetime
from pydantic import ValidationError

from schemas import FrontMatterSchema, ImageSchema, validate_front_matter


class TestRequiredFields:

    def test_title_required(self):
        """Test: Missing title fails validation."""
        with pytest.raises(ValidationError):
            validate_front_matter({'date': '2024-01-01'})

    def test_empty_block(self):
        """Test: An empty front matter block has no title."""
        with pytest.raises(ValidationError):
            validate_front_matter(None)

    def test_non_string_title(self):
        """Test: YAML numbers as titles are coerced to strings."""
        meta = validate_front_matter({'title': 2020})
        assert meta.title == '2020'


class TestCategories:

    def test_string_category(self):
        meta = validate_front_matter({'title': 'T', 'categories': 'Spring Boot'})
        assert meta.categories == ['Spring Boot']

    def test_list_deduplicated(self):
        meta = validate_front_matter({'title': 'T', 'categories': ['Java', 'AWS', 'Java']})
        assert meta.categories == ['Java', 'AWS']

    def test_missing_categories(self):
        meta = validate_front_matter({'title': 'T'})
        assert meta.categories == []

    def test_number_category(self):
        meta = validate_front_matter({'title': 'T', 'categories': 5})
        assert meta.categories == ['5']

    @pytest.mark.parametrize('value', [True, {'a': 1}, ['Java', None]])
    def test_non_text_rejected(self, value):
        """Test: Scalars YAML parses as booleans or mappings fail validation."""
        with pytest.raises(ValidationError, match='categories'):
            validate_front_matter({'title': 'T', 'categories': value})

    def test_unicode_category_kept(self):
        meta = validate_front_matter({'title': 'T', 'categories': '日本語'})
        assert meta.categories == ['日本語']

    @pytest.mark.parametrize('field', ['categories', 'tags'])
    def test_punctuation_only_term_rejected(self, field):
        with pytest.raises(ValidationError, match=field):
            validate_front_matter({'title': 'T', field: ['Java', '!!!']})


class TestTags:

    def test_string_tag(self):
        meta = validate_front_matter({'title': 'T', 'tags': 'testing'})
        assert meta.tags == ['testing']

    def test_tags_default_empty(self):
        assert validate_front_matter({'title': 'T'}).tags == []


class TestAuthors:

    def test_author_string(self):
        meta = validate_front_matter({'title': 'T', 'author': 'tom'})
        assert meta.author_keys == ['tom']

    def test_authors_and_author_merged(self):
        meta = validate_front_matter({'title': 'T', 'authors': ['tom', 'petros'], 'author': 'tom'})
        assert meta.author_keys == ['tom', 'petros']


class TestDates:

    def test_date_object(self):
        meta = validate_front_matter({'title': 'T', 'date': date(2024, 1, 15)})
        assert meta.date == date(2024, 1, 15)

    def test_datetime_truncated(self):
        meta = validate_front_matter({'title': 'T', 'date': datetime(2024, 1, 15, 10, 30)})
        assert meta.date == date(2024, 1, 15)

    def test_jekyll_style_string(self):
        meta = validate_front_matter({'title': 'T', 'date': '2024-03-10 09:30:00 +0100'})
        assert meta.date == date(2024, 3, 10)

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            validate_front_matter({'title': 'T', 'date': 'last tuesday'})

    def test_modified_preferred_over_last_modified_at(self):
        meta = validate_front_matter({
            'title': 'T',
            'modified': '2024-02-01',
            'last_modified_at': '2024-03-01',
        })
        assert meta.last_modified == date(2024, 2, 1)

    def test_last_modified_at_fallback(self):
        meta = validate_front_matter({'title': 'T', 'last_modified_at': '2024-03-01'})
        assert meta.last_modified == date(2024, 3, 1)


class TestImage:

    def test_string_image(self):
        meta = validate_front_matter({'title': 'T', 'image': 'a.jpg'})
        assert meta.image.teaser == 'a.jpg'
        assert meta.image.opengraph == 'a.jpg'

    def test_object_image(self):
        meta = validate_front_matter({'title': 'T', 'image': {'teaser': 't.jpg', 'opengraph': 'o.jpg'}})
        assert meta.image.teaser == 't.jpg'
        assert meta.image.opengraph == 'o.jpg'

    def test_partial_object_filled(self):
        image = ImageSchema(opengraph='o.jpg')
        assert image.teaser == 'o.jpg'

    def test_empty_object_rejected(self):
        with pytest.raises(ValidationError):
            validate_front_matter({'title': 'T', 'image': {}})


class TestFlags:

    def test_defaults(self):
        meta = validate_front_matter({'title': 'T'})
        assert meta.sidebar is True
        assert meta.comments is True
        assert meta.ads is True
        assert meta.toc is False
        assert meta.draft is False

    def test_unknown_keys_ignored(self):
        meta = validate_front_matter({'title': 'T', 'layout': 'post', 'weight': 3})
        assert isinstance(meta, FrontMatterSchema)
