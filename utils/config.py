"""
Unified configuration management with Pydantic validation.
Loads and validates all environment variables for the report engine.
"""

from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv
from pydantic import Field, field_validator, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Report engine configuration with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========================
    # Branding Configuration
    # ========================
    organization_name: str = Field(
        default="Occupational Health & Safety Unit",
        alias="ORGANIZATION_NAME"
    )
    report_title: str = Field(
        default="Occupational Health and Safety Field Observation Report",
        alias="REPORT_TITLE"
    )
    logo_path: str = Field(default="assets/logo.png", alias="LOGO_PATH")

    # ========================
    # Font Configuration
    # ========================
    font_family: str = Field(default="DejaVuSans", alias="FONT_FAMILY")
    font_dir: Optional[str] = Field(default=None, alias="FONT_DIR")
    required_glyphs: str = Field(
        default="çğıöşüÇĞİÖŞÜ",
        alias="REQUIRED_GLYPHS"
    )

    # ========================
    # Image Configuration
    # ========================
    asset_root: str = Field(default=".", alias="ASSET_ROOT")
    max_image_dimension: int = Field(default=400, alias="MAX_IMAGE_DIMENSION")
    image_quality: int = Field(default=80, alias="IMAGE_QUALITY")
    max_images_per_finding: int = Field(default=2, alias="MAX_IMAGES_PER_FINDING")
    max_image_workers: int = Field(default=4, alias="MAX_IMAGE_WORKERS")
    max_file_size_mb: int = Field(default=10, alias="MAX_FILE_SIZE_MB")
    allowed_extensions: str = Field(
        default="jpg,jpeg,png,webp,bmp,gif",
        alias="ALLOWED_EXTENSIONS"
    )

    # ========================
    # File Storage Configuration
    # ========================
    report_dir: str = Field(default="reports", alias="REPORT_DIR")
    log_dir: str = Field(default="logs", alias="LOG_DIR")

    # ========================
    # Logging Configuration
    # ========================
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    # ========================
    # Validators
    # ========================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("image_quality")
    @classmethod
    def validate_quality(cls, v: int) -> int:
        """JPEG quality above 95 disables Pillow's quantization tables."""
        if not 1 <= v <= 95:
            raise ValueError("IMAGE_QUALITY must be between 1 and 95")
        return v

    @field_validator("max_image_dimension", "max_image_workers", "max_file_size_mb")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @field_validator("max_images_per_finding")
    @classmethod
    def validate_image_cap(cls, v: int) -> int:
        if v < 0:
            raise ValueError("MAX_IMAGES_PER_FINDING cannot be negative")
        return v

    # ========================
    # Helper Properties
    # ========================

    @property
    def allowed_extensions_list(self) -> List[str]:
        """Get allowed extensions as list."""
        return [ext.strip().lower().lstrip(".") for ext in self.allowed_extensions.split(",") if ext.strip()]

    def get_asset_root(self) -> Path:
        """Base directory that stored-file image references resolve against."""
        return Path(self.asset_root).resolve()

    def get_report_dir(self) -> Path:
        """Get report directory as Path object."""
        path = Path(self.report_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_log_dir(self) -> Path:
        """Get log directory as Path object."""
        path = Path(self.log_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path


def get_config() -> Config:
    """
    Load and validate configuration.
    Exits if configuration is invalid.
    """
    try:
        return Config()

    except ValidationError as e:
        print("\n❌ Configuration Error:")
        print("=" * 60)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"\n Field: {field}")
            print(f"  Error: {error['msg']}")
            if "input" in error:
                print(f"  Value: {error['input']}")
        print("\n" + "=" * 60)
        print("\nPlease check your .env file and fix the errors above.")
        print("See .env.example for reference.\n")
        raise SystemExit(1)


# Global configuration instance
config = get_config()
