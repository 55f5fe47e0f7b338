"""
kassa/utils/constants.py

Purpose: Centralized static content

- All user-facing messages (Indonesian, as shown in the app)
- Payment methods and roles
- Report labels

(Prevents hardcoding across the codebase)
"""

# ============================================================
# PAYMENT METHODS & ROLES
# ============================================================

PAYMENT_METHODS = ("Tunai", "QR", "Transfer")

ROLE_USER = "user"
ROLE_SUPERADMIN = "superadmin"

# Allowed difference between amount paid and amount due
PAYMENT_TOLERANCE = 0.01

# ============================================================
# AUTH
# ============================================================

MSG_LOGIN_SUCCESS = "Selamat datang kembali!"
MSG_LOGIN_FAILED = "Email atau password salah."
MSG_EMAIL_TAKEN = "Email sudah terdaftar."
MSG_LOGIN_REQUIRED = "Silakan masuk terlebih dahulu."
MSG_SUPERADMIN_ONLY = "Halaman ini hanya untuk superadmin."

# ============================================================
# ACCOUNT SETTINGS
# ============================================================

MSG_USERNAME_TOO_SHORT = "Username harus lebih dari 2 karakter."
MSG_PASSWORD_MISMATCH = "Password baru tidak cocok."
MSG_PASSWORD_TOO_SHORT = "Password baru minimal 6 karakter."
MSG_PASSWORD_TOO_SHORT_REGISTER = "Password minimal 6 karakter."
MSG_CURRENT_PASSWORD_WRONG = "Password saat ini salah."
MSG_PASSWORD_UPDATED = "Password berhasil diperbarui."
MSG_PHOTO_INVALID_TYPE = "File harus berupa gambar (JPEG, PNG, GIF atau WebP)."
MSG_PHOTO_TOO_LARGE = "Ukuran foto terlalu besar."
MSG_PHOTO_EMPTY = "File foto kosong."
MSG_PHOTO_NOT_FOUND = "Foto profil tidak ditemukan."
MSG_USER_NOT_FOUND = "Pengguna tidak ditemukan."

# ============================================================
# USER MANAGEMENT (SUPERADMIN)
# ============================================================

MSG_CANNOT_CHANGE_OWN_ROLE = "Anda tidak dapat mengubah role akun Anda sendiri."
MSG_CANNOT_DELETE_SELF = "Anda tidak dapat menghapus akun Anda sendiri."
MSG_ROLE_CHANGED = "Role {username} telah diubah menjadi {role}."
MSG_USER_DELETED = "Pengguna {username} telah dihapus."

# ============================================================
# PRODUCTS
# ============================================================

MSG_PRODUCT_NAME_TOO_SHORT = "Nama produk minimal 2 karakter."
MSG_PRODUCT_PRICE_NEGATIVE = "Harga harus angka positif."
MSG_PRODUCT_DELETED = "Produk berhasil dihapus."
MSG_PRODUCT_NOT_FOUND = "Produk tidak ditemukan."
MSG_PRODUCT_REQUIRED = "Silakan pilih produk."

# ============================================================
# TRANSACTIONS
# ============================================================

MSG_QUANTITY_MIN = "Kuantitas minimal 1."
MSG_PRICE_NEGATIVE = "Harga tidak boleh negatif."
MSG_PAYMENT_AMOUNT_NEGATIVE = "Jumlah tidak boleh negatif."
MSG_PAYMENT_REQUIRED = "Minimal ada satu metode pembayaran."
MSG_PAYMENT_MISMATCH = "Total pembayaran harus sama dengan total tagihan."
MSG_TRANSACTION_DELETED = "Transaksi berhasil dihapus."
MSG_TRANSACTIONS_CLEARED = "Semua transaksi telah berhasil dihapus."
MSG_TRANSACTION_NOT_FOUND = "Transaksi tidak ditemukan."
MSG_INVALID_DATE_RANGE = "Tanggal akhir harus setelah tanggal awal."

# ============================================================
# CHAT
# ============================================================

MSG_EMPTY_MESSAGE = "Pesan tidak boleh kosong."
MSG_CANNOT_CHAT_SELF = "Anda tidak dapat mengirim pesan ke diri sendiri."

# ============================================================
# REPORTS
# ============================================================

REPORT_TITLE = "Laporan Penjualan"
REPORT_SHEET_TITLE = "Laporan Penjualan"

REPORT_COLUMNS = (
    "No",
    "ID Transaksi",
    "Waktu",
    "Nama Produk",
    "Kuantitas",
    "Harga Satuan",
    "Total Penjualan",
    "Tunai",
    "QR",
    "Transfer",
)

# Spreadsheet column widths, in characters, matching REPORT_COLUMNS
REPORT_COLUMN_WIDTHS = (5, 38, 20, 25, 10, 15, 15, 15, 15, 15)

# Month names for the "Periode" line of the Excel export
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
