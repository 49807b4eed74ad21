"""Fixed values from the ZIP format, plus the reader's own limits."""

SIGNATURE_LENGTH = 4

# Local file header
LFH_SIGNATURE = 0x04034B50
LFH_LENGTH = 26

# Central directory header
CDH_SIGNATURE = 0x02014B50
CDH_LENGTH = 42

# End of central directory record
EOCDR_SIGNATURE = 0x06054B50
# The minimum length of the EOCDR, excluding the signature.
EOCDR_LENGTH = 18

# Zip64 end of central directory record and locator
ZIP64_EOCDR_SIGNATURE = 0x06064B50
ZIP64_EOCDR_LENGTH = 52
ZIP64_EOCDL_SIGNATURE = 0x07064B50
# The length of the Zip64 EOCDL, including the signature.
ZIP64_EOCDL_LENGTH = 20

# Header field value that defers to the Zip64 counterpart.
NON_ZIP64_MAX_SIZE = 0xFFFFFFFF
# The maximum number of files or disks before Zip64 is required.
NON_ZIP64_MAX_NUM_FILES = 0xFFFF

DATA_DESCRIPTOR_SIGNATURE = 0x08074B50

# Buffer size used when searching backwards for the EOCDR (2 KiB).
EOCDR_BUFFER_SIZE = 2048
# The EOCDR signature cannot start within this many bytes of the end.
EOCDR_UPPER_BOUND = EOCDR_LENGTH
# The EOCDR signature cannot start further than this from the end.
EOCDR_LOWER_BOUND = EOCDR_UPPER_BOUND + SIGNATURE_LENGTH + 0xFFFF

# Upper bound on the read buffer used for the central directory (20 MiB).
MAX_CD_BUFFER_SIZE = 20 * 1024 * 1024

SPEC_VERSION_MADE_BY = 63