# messages.py
from __future__ import annotations
from typing import Dict

from state import Language

VIOLATION_TEXT: Dict[str, str] = {
    "SiteNameRequired": "Please enter a name for the site.",
    "SiteUrlRequired": "Please enter the site's URL.",
    "ConnectionStringRequired": "Please enter a connection string.",
    "DataStoreTypeInvalid": "Please choose a supported data store.",
    "AdminEmailRequired": "Please enter the administrator's email address.",
    "AdminEmailInvalid": "The administrator email address is not valid.",
    "AdminPasswordRequired": "Please enter a password for the administrator.",
    "AdminPasswordTooShort": "The administrator password is too short.",
    "PasswordConfirmationMismatch": "The passwords do not match.",
    "AttachmentsFolderRequired": "Please enter an attachments folder.",
}

LANGUAGE_NAMES: Dict[Language, str] = {
    Language.ENGLISH: "English",
    Language.CZECH: "Čeština",
    Language.GERMAN: "Deutsch",
    Language.DUTCH: "Nederlands",
    Language.SPANISH: "Español",
    Language.HINDI: "हिंदी",
    Language.ITALIAN: "Italiano",
    Language.POLISH: "Polski",
    Language.PORTUGUESE: "Português",
    Language.RUSSIAN: "Русский",
    Language.SWEDISH: "Svenska",
}

# Step 1 welcome paragraph
INTRO_TEXT: Dict[Language, str] = {
    Language.ENGLISH: "Thank you for downloading the wiki engine. The installer writes "
                      "the settings you enter to the configuration file and the database.",
    Language.CZECH: "Děkujeme, že jste si stáhli wiki. Instalátor uloží zadaná "
                    "nastavení do konfiguračního souboru a do databáze.",
    Language.GERMAN: "Danke, dass Sie die Wiki-Engine herunterladen. Der Installer schreibt "
                     "Ihre Einstellungen in die Konfigurationsdatei und die Datenbank.",
    Language.DUTCH: "Bedankt voor het downloaden van de wiki engine. De installatie schrijft "
                    "de gemaakte instellingen naar het configuratiebestand en de database.",
    Language.SPANISH: "Gracias por descargar el motor wiki. El instalador guarda la "
                      "configuración en el archivo de configuración y en la base de datos.",
    Language.HINDI: "विकी इंजन डाउनलोड करने के लिए धन्यवाद। इंस्टॉलर आपकी सेटिंग्स "
                    "कॉन्फ़िगरेशन फ़ाइल और डेटाबेस में सहेजता है।",
    Language.ITALIAN: "Grazie per il download del motore wiki. L'installazione salva le "
                      "impostazioni nel file di configurazione e nel database.",
    Language.POLISH: "Dziękujemy za pobranie silnika wiki. Instalator zapisze ustawienia "
                     "w pliku konfiguracyjnym i w bazie danych.",
    Language.PORTUGUESE: "Obrigado por baixar o motor wiki. O instalador grava as "
                         "configurações no arquivo de configuração e no banco de dados.",
    Language.RUSSIAN: "Спасибо за загрузку вики-движка. Мастер установки сохранит настройки "
                      "в файл конфигурации и в базу данных.",
    Language.SWEDISH: "Tack för att du laddat ned wikimotorn. Installationen sparar "
                      "inställningarna i konfigurationsfilen och databasen.",
}


def violation_text(message_key: str, language: Language = Language.ENGLISH) -> str:
    # Only English violation text ships with the installer
    return VIOLATION_TEXT.get(message_key, message_key)


def intro_text(language: Language) -> str:
    return INTRO_TEXT.get(Language(language), INTRO_TEXT[Language.ENGLISH])
