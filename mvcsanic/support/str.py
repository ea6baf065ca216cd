"""
String Helper Functions
Case conversions between URL, controller and method names
"""
import re


class Str:
    """
    String manipulation helper class

    Controllers and actions are named in PascalCase ("ProductsList"),
    appear dashed in query strings ("products-list") and map to
    snake_case methods ("products_list_action").
    """

    @staticmethod
    def snake(value: str, delimiter: str = '_') -> str:
        """
        Convert a string to snake_case

        Example:
            Str.snake('NotFound')      # 'not_found'
            Str.snake('products-list') # 'products_list'
        """
        if not value:
            return value

        value = value.replace(' ', delimiter).replace('-', delimiter)

        # Insert delimiter before uppercase letters
        value = re.sub('(.)([A-Z][a-z]+)', r'\1' + delimiter + r'\2', value)
        value = re.sub('([a-z0-9])([A-Z])', r'\1' + delimiter + r'\2', value)

        value = value.lower()
        value = re.sub(f'{re.escape(delimiter)}+', delimiter, value)

        return value.strip(delimiter)

    @staticmethod
    def studly(value: str) -> str:
        """
        Convert a string to StudlyCase (PascalCase), keeping inner capitals

        Example:
            Str.studly('products-list')  # 'ProductsList'
            Str.studly('ProductsList')   # 'ProductsList'
        """
        if not value:
            return value

        value = value.replace('_', ' ').replace('-', ' ')
        return ''.join(word[0].upper() + word[1:] for word in value.split())

    @staticmethod
    def limit(value: str, limit: int = 100, end: str = '...') -> str:
        """Truncate a string to the given length"""
        if len(value) <= limit:
            return value
        return value[:max(limit - len(end), 0)] + end
