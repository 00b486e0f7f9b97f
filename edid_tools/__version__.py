__title__ = 'edid_tools'
__description__ = 'Decoder for monitor EDID (Extended Display Identification Data) blocks'
__url__ = 'https://github.com/dskrypa/edid_tools'
__version__ = '2024.10.18'
__author__ = 'Doug Skrypa'
__author_email__ = 'dskrypa@gmail.com'
