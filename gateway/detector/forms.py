from flask_wtf import FlaskForm  # type: ignore
from flask_wtf.file import FileField, FileRequired  # type: ignore


# 검출 요청 업로드 폼 (JSON API 라서 CSRF 는 사용하지 않음)
class DetectForm(FlaskForm):
    class Meta:
        csrf = False

    image = FileField("이미지", validators=[FileRequired("No image uploaded")])
