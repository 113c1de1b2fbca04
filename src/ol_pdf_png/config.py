from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ol_pdf_png.options import ConversionDefaults, VerbosityLevel


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    viewport_scale: float = Field(default=1.0, gt=0, alias="PDF2PNG_VIEWPORT_SCALE")
    disable_font_face: bool = Field(default=True, alias="PDF2PNG_DISABLE_FONT_FACE")
    use_system_fonts: bool = Field(default=False, alias="PDF2PNG_USE_SYSTEM_FONTS")
    enable_xfa: bool = Field(default=False, alias="PDF2PNG_ENABLE_XFA")
    output_file_mask: str = Field(default="buffer", alias="PDF2PNG_OUTPUT_FILE_MASK")
    return_page_content: bool = Field(default=True, alias="PDF2PNG_RETURN_PAGE_CONTENT")
    process_pages_in_parallel: bool = Field(default=False, alias="PDF2PNG_PROCESS_PAGES_IN_PARALLEL")
    concurrency_limit: int = Field(default=4, alias="PDF2PNG_CONCURRENCY_LIMIT")
    verbosity_level: int = Field(default=int(VerbosityLevel.ERRORS), alias="PDF2PNG_VERBOSITY_LEVEL")

    def conversion_defaults(self) -> ConversionDefaults:
        return ConversionDefaults(
            viewport_scale=self.viewport_scale,
            disable_font_face=self.disable_font_face,
            use_system_fonts=self.use_system_fonts,
            enable_xfa=self.enable_xfa,
            output_file_mask=self.output_file_mask,
            return_page_content=self.return_page_content,
            process_pages_in_parallel=self.process_pages_in_parallel,
            concurrency_limit=max(1, self.concurrency_limit),
            verbosity_level=self.verbosity_level,
        )


def load_settings() -> Settings:
    return Settings()
