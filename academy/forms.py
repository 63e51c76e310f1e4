from flask import request
from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileRequired
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import StringField, IntegerField, FloatField
from wtforms.validators import DataRequired, Email, Length, Optional, AnyOf, NumberRange, StopValidation

from academy.bookmarks import CONTENT_TYPES
from academy.errors import ValidationError

JSON_SCALARS = (str, int, float, bool)


class JsonStringField(StringField):
    """StringField that refuses JSON numbers and booleans instead of passing them on."""

    accepts_numbers = False

    def process_formdata(self, valuelist):
        if valuelist and not isinstance(valuelist[0], str):
            value = valuelist[0]
            if self.accepts_numbers and isinstance(value, (int, float)) and not isinstance(value, bool):
                valuelist = [str(value)]
            else:
                raise ValueError(f'{self.label.text} must be text.')
        super().process_formdata(valuelist)

    def pre_validate(self, form):
        # keep "must be text" from being replaced by a "required" message
        if self.process_errors:
            raise StopValidation()


class TextOrNumberField(JsonStringField):
    """Text field that also takes a JSON number, stored as its string form."""

    accepts_numbers = True


def not_blank(message):
    """Reject a field that was sent but is empty; absent fields pass."""
    def _not_blank(form, field):
        if field.raw_data and not (field.data or '').strip():
            raise StopValidation(message)
    return _not_blank


class ApiForm(FlaskForm):
    """Form fed from a JSON or multipart API body; no CSRF token."""

    class Meta:
        csrf = False

        def wrap_formdata(self, form, formdata):
            if request.is_json and form.is_submitted():
                payload = request.get_json(silent=True)
                if not isinstance(payload, dict):
                    raise ValidationError('Request body must be a JSON object.')
                for key, value in payload.items():
                    if key in form._fields and value is not None and not isinstance(value, JSON_SCALARS):
                        raise ValidationError(f'{key} must be a single value.')
                # null means "not sent"
                return ImmutableMultiDict({k: v for k, v in payload.items() if v is not None})
            return super().wrap_formdata(form, formdata)

    def first_error(self):
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return 'Invalid request.'

    def provided_data(self):
        """Only the fields the client actually sent."""
        return {
            name: field.data for name, field in self._fields.items()
            if field.raw_data and field.data not in (None, '')
        }


class LoginForm(ApiForm):
    email = JsonStringField('Email', validators=[DataRequired(message='Email is required.'), Email(message='Enter a valid email address.')])
    password = JsonStringField('Password', validators=[DataRequired(message='Password is required.')])
    verification_code = JsonStringField('Verification code', validators=[Optional(), Length(max=12)])


class VideoForm(ApiForm):
    title = JsonStringField('Title', validators=[DataRequired(message='Title, description and video URL are required.'), Length(max=200)])
    description = JsonStringField('Description', validators=[DataRequired(message='Title, description and video URL are required.')])
    videoUrl = JsonStringField('Video URL', validators=[DataRequired(message='Title, description and video URL are required.'), Length(max=2048)])
    thumbnailUrl = JsonStringField('Thumbnail URL', validators=[Optional(), Length(max=2048)])
    duration = JsonStringField('Duration', validators=[Optional(), Length(max=20)])
    category = JsonStringField('Category', validators=[Optional(), Length(max=100)])


class VideoUpdateForm(ApiForm):
    title = JsonStringField('Title', validators=[not_blank('Title cannot be blank.'), Length(max=200)])
    description = JsonStringField('Description', validators=[not_blank('Description cannot be blank.')])
    videoUrl = JsonStringField('Video URL', validators=[not_blank('Video URL cannot be blank.'), Length(max=2048)])
    thumbnailUrl = JsonStringField('Thumbnail URL', validators=[Optional(), Length(max=2048)])
    duration = JsonStringField('Duration', validators=[Optional(), Length(max=20)])
    category = JsonStringField('Category', validators=[Optional(), Length(max=100)])
    teacherId = JsonStringField('Teacher id', validators=[Optional(), Length(max=128)])
    teacherName = JsonStringField('Teacher name', validators=[Optional(), Length(max=120)])
    views = IntegerField('Views', validators=[Optional(), NumberRange(min=0)])
    likes = IntegerField('Likes', validators=[Optional(), NumberRange(min=0)])
    rating = FloatField('Rating', validators=[Optional(), NumberRange(min=0, max=5)])


class VideoUploadForm(ApiForm):
    title = JsonStringField('Title', validators=[DataRequired(message='Title and description are required.'), Length(max=200)])
    description = JsonStringField('Description', validators=[DataRequired(message='Title and description are required.')])
    duration = JsonStringField('Duration', validators=[Optional(), Length(max=20)])
    video = FileField('Video', validators=[FileRequired(message='A video file is required.')])
    thumbnail = FileField('Thumbnail', validators=[Optional()])


class BookmarkForm(ApiForm):
    id = TextOrNumberField('Id', validators=[DataRequired(message='Content id is required.')])
    title = JsonStringField('Title', validators=[DataRequired(message='Title is required.'), Length(max=200)])
    author = JsonStringField('Author', validators=[DataRequired(message='Author is required.'), Length(max=120)])
    type = JsonStringField('Type', validators=[DataRequired(message='Content type is required.'),
                                               AnyOf(CONTENT_TYPES, message='Unknown content type.')])
    slug = JsonStringField('Slug', validators=[Optional(), Length(max=200)])
    description = JsonStringField('Description', validators=[Optional()])
    level = JsonStringField('Level', validators=[Optional(), Length(max=50)])
    rating = TextOrNumberField('Rating', validators=[Optional(), Length(max=10)])
    time = JsonStringField('Time', validators=[Optional(), Length(max=50)])
    date = JsonStringField('Date', validators=[Optional(), Length(max=50)])
    participants = IntegerField('Participants', validators=[Optional(), NumberRange(min=0)])
    maxParticipants = IntegerField('Max participants', validators=[Optional(), NumberRange(min=0)])
    imageUrl = JsonStringField('Image URL', validators=[Optional(), Length(max=2048)])


class EnrollmentForm(BookmarkForm):
    progress = FloatField('Progress', validators=[Optional(), NumberRange(min=0, max=100)])
