from src.service.box_office.domain.value_object.ticket_id import mint_ticket_id

__all__ = ['mint_ticket_id']
